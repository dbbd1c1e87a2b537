from dataclasses import dataclass
from typing import Optional

import pandas as pd

from ecommerce_bi.columns import (
    DIMENSIONS,
    FACT_TABLE_COLUMNS,
    PURCHASE_DATE,
    PURCHASE_DATE_KEY,
    PURCHASE_MINUTE,
    PURCHASE_TS,
)
from ecommerce_bi.logger import setup_logger
from ecommerce_bi.model.dimensions import build_dimensions
from ecommerce_bi.model.measures import FilterContext, get_measure
from ecommerce_bi.model.time_dimensions import build_calendar, build_datetime, minute_of

logger = setup_logger("model.star")


@dataclass
class StarModel:
    """Fact table plus the dimensions it references."""

    facts: pd.DataFrame
    product: pd.DataFrame
    customer: pd.DataFrame
    seller: pd.DataFrame
    calendar: pd.DataFrame
    datetime: pd.DataFrame

    def tables(self) -> dict[str, pd.DataFrame]:
        return {
            "fact_orders": self.facts,
            "dim_product": self.product,
            "dim_customer": self.customer,
            "dim_seller": self.seller,
            "dim_calendar": self.calendar,
            "dim_datetime": self.datetime,
        }

    def joined(self) -> pd.DataFrame:
        """
        Fact rows with every dimension attribute attached.

        Joins are many-to-one, so the result has exactly one row per fact row;
        a duplicated dimension key raises pandas.errors.MergeError.
        """
        wide = self.facts
        for name, (key, _) in DIMENSIONS.items():
            wide = wide.merge(getattr(self, name), on=key, how="left", validate="many_to_one")

        calendar = self.calendar.rename(columns={"date_key": PURCHASE_DATE_KEY, "date": PURCHASE_DATE})
        wide = wide.merge(calendar, on=PURCHASE_DATE_KEY, how="left", validate="many_to_one")

        minutes = self.datetime[["datetime", "hour", "hour_bucket"]].rename(columns={"datetime": PURCHASE_MINUTE})
        minutes[PURCHASE_MINUTE] = minutes[PURCHASE_MINUTE].astype("datetime64[ns]")
        wide = wide.assign(**{PURCHASE_MINUTE: wide[PURCHASE_MINUTE].astype("datetime64[ns]")})
        wide = wide.merge(minutes, on=PURCHASE_MINUTE, how="left", validate="many_to_one")

        return wide

    def evaluate(self, measure_name: str, ctx: Optional[FilterContext] = None):
        """Evaluate a registered measure (e.g. "Total Sales") under `ctx`."""
        return get_measure(measure_name)(self.joined(), ctx)


def build_model(facts_df: pd.DataFrame) -> StarModel:
    """
    Assemble the star schema from the cleaned fact rows.

    Pure: the input frame is not modified and the same input always yields
    the same tables.
    """
    logger.info(f"Building star model from {len(facts_df)} fact rows")
    facts = facts_df.copy()

    dims = build_dimensions(facts)
    calendar = build_calendar(facts[PURCHASE_TS])
    datetime_dim = build_datetime(facts[PURCHASE_TS])

    facts[PURCHASE_DATE_KEY] = facts[PURCHASE_TS].dt.strftime("%Y%m%d")
    if facts.empty:
        facts[PURCHASE_MINUTE] = pd.Series(dtype="datetime64[ns]")
    else:
        facts[PURCHASE_MINUTE] = minute_of(facts[PURCHASE_TS], facts[PURCHASE_TS].min())

    model = StarModel(
        facts=facts[FACT_TABLE_COLUMNS].reset_index(drop=True),
        product=dims["product"],
        customer=dims["customer"],
        seller=dims["seller"],
        calendar=calendar,
        datetime=datetime_dim,
    )
    logger.info(
        "Star model ready: "
        + ", ".join(f"{name}={len(table)}" for name, table in model.tables().items())
    )
    return model
