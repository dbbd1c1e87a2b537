"""
Report measures.

Every measure is a pure function of (facts, filter context) returning a
scalar. Ratio measures return BLANK (None) instead of raising or producing
inf/NaN when there is nothing to divide by.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

import pandas as pd

from ecommerce_bi.columns import (
    CATEGORY,
    CUSTOMER_ID,
    CUSTOMER_STATE,
    DELIVERED_TS,
    ORDER_ID,
    ORDER_STATUS,
    PRICE,
    PURCHASE_TS,
    SELLER_ID,
    SELLER_STATE,
)

BLANK = None


@dataclass(frozen=True)
class FilterContext:
    """
    Filters a consumer applies before a measure is evaluated.

    Date bounds are inclusive and compare against the purchase date.
    `predicate` receives the fact frame and returns a boolean mask.
    """

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    categories: Optional[tuple[str, ...]] = None
    customer_states: Optional[tuple[str, ...]] = None
    seller_states: Optional[tuple[str, ...]] = None
    statuses: Optional[tuple[str, ...]] = None
    predicate: Optional[Callable[[pd.DataFrame], pd.Series]] = None

    def mask(self, facts_df: pd.DataFrame) -> pd.Series:
        mask = pd.Series(True, index=facts_df.index)

        if self.start_date is not None or self.end_date is not None:
            purchase_day = facts_df[PURCHASE_TS].dt.normalize()
            if self.start_date is not None:
                mask &= purchase_day >= pd.Timestamp(self.start_date)
            if self.end_date is not None:
                mask &= purchase_day <= pd.Timestamp(self.end_date)

        for column, allowed in (
            (CATEGORY, self.categories),
            (CUSTOMER_STATE, self.customer_states),
            (SELLER_STATE, self.seller_states),
            (ORDER_STATUS, self.statuses),
        ):
            if allowed is None:
                continue
            if column not in facts_df.columns:
                raise ValueError(
                    f"Filter column '{column}' absent: evaluate against StarModel.joined()"
                )
            mask &= facts_df[column].isin(list(allowed))

        if self.predicate is not None:
            mask &= pd.Series(self.predicate(facts_df), index=facts_df.index).astype(bool)

        return mask

    def apply(self, facts_df: pd.DataFrame) -> pd.DataFrame:
        return facts_df[self.mask(facts_df)]


def _filtered(facts_df: pd.DataFrame, ctx: Optional[FilterContext]) -> pd.DataFrame:
    return facts_df if ctx is None else ctx.apply(facts_df)


def safe_divide(numerator, denominator):
    """Divide, or return BLANK when the denominator is zero or blank."""
    if denominator is BLANK or numerator is BLANK or denominator == 0:
        return BLANK
    return numerator / denominator


def total_sales(facts_df: pd.DataFrame, ctx: Optional[FilterContext] = None) -> Decimal:
    facts = _filtered(facts_df, ctx)
    return sum(facts[PRICE], Decimal("0"))


def total_orders(facts_df: pd.DataFrame, ctx: Optional[FilterContext] = None) -> int:
    facts = _filtered(facts_df, ctx)
    return int(facts[ORDER_ID].nunique())


def total_items(facts_df: pd.DataFrame, ctx: Optional[FilterContext] = None) -> int:
    """Number of order lines."""
    return int(len(_filtered(facts_df, ctx)))


def total_customers(facts_df: pd.DataFrame, ctx: Optional[FilterContext] = None) -> int:
    return int(_filtered(facts_df, ctx)[CUSTOMER_ID].nunique())


def total_sellers(facts_df: pd.DataFrame, ctx: Optional[FilterContext] = None) -> int:
    return int(_filtered(facts_df, ctx)[SELLER_ID].nunique())


def average_order_value(facts_df: pd.DataFrame, ctx: Optional[FilterContext] = None) -> Optional[Decimal]:
    facts = _filtered(facts_df, ctx)
    return safe_divide(total_sales(facts), total_orders(facts))


def average_delivery_time(facts_df: pd.DataFrame, ctx: Optional[FilterContext] = None) -> Optional[float]:
    """
    Mean number of days between purchase and delivery to the customer.

    Days are counted as calendar-day boundaries crossed (a purchase at 23:50
    delivered at 00:10 the next day counts as one day). Undelivered lines
    are left out of both the sum and the count. A delivery dated before its
    purchase contributes a negative day count; it is not clipped to zero.
    """
    facts = _filtered(facts_df, ctx)
    delivered = facts[facts[DELIVERED_TS].notna()]
    if delivered.empty:
        return BLANK

    days = (delivered[DELIVERED_TS].dt.normalize() - delivered[PURCHASE_TS].dt.normalize()).dt.days
    return safe_divide(float(days.sum()), int(days.count()))


MEASURES: dict[str, Callable] = {
    "Total Sales": total_sales,
    "Total Orders": total_orders,
    "Total Items": total_items,
    "Total Customers": total_customers,
    "Total Sellers": total_sellers,
    "Average Order Value": average_order_value,
    "Average Delivery Time": average_delivery_time,
}


def get_measure(name: str) -> Callable:
    try:
        return MEASURES[name]
    except KeyError:
        raise KeyError(f"Unknown measure '{name}'. Available: {sorted(MEASURES)}") from None


def measure_by(
    frame: pd.DataFrame,
    measure: Callable,
    by: str,
    ctx: Optional[FilterContext] = None,
) -> pd.Series:
    """
    Evaluate `measure` once per distinct value of `by`, the way a chart
    visual breaks a card value down by an axis.
    """
    filtered = _filtered(frame, ctx)
    results = {key: measure(group) for key, group in filtered.groupby(by, sort=True)}
    breakdown = pd.Series(results, name=measure.__name__, dtype="object")
    breakdown.index.name = by
    return breakdown
