from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

import numpy as np
import pandas as pd

from ecommerce_bi.columns import (
    CATEGORICAL_COLUMNS,
    DELIVERED_TS,
    FACT_COLUMNS,
    KEY_COLUMNS,
    ORDER_ID,
    ORDER_STATUS,
    PRICE,
    PURCHASE_TS,
)
from ecommerce_bi.logger import setup_logger

logger = setup_logger("etl.clean")

DEFAULT_EXCLUDED_STATUSES = frozenset({"canceled", "unavailable"})
SENTINEL = "N/A"
CENT = Decimal("0.01")


def as_text(series: pd.Series) -> pd.Series:
    """
    Stringify non-null values; blank strings count as missing.

    Integer ids stored as float (a nullable integer column read from
    Parquet) are rendered without the trailing ".0".
    """
    if pd.api.types.is_float_dtype(series):
        present = series.dropna()
        if np.isfinite(present).all() and (present % 1 == 0).all():
            series = series.astype("Int64")

    text = series.astype(str).str.strip().astype("object")
    text = text.where(series.notna().to_numpy(dtype=bool), np.nan)
    return text.mask(text == "", np.nan)


def _to_timestamps(series: pd.Series) -> pd.Series:
    # Offsets are converted to UTC and dropped; naive values are taken as UTC
    parsed = pd.to_datetime(series, errors="coerce", format="mixed", utc=True)
    return parsed.dt.tz_localize(None)


def _to_decimal(value) -> Decimal:
    return Decimal(str(value).strip()).quantize(CENT, rounding=ROUND_HALF_UP)


def _drop(df: pd.DataFrame, invalid: pd.Series, reason: str) -> pd.DataFrame:
    dropped = int(invalid.sum())
    if dropped > 0:
        logger.warning(f"Excluded {dropped} rows: {reason}")
    return df[~invalid].copy()


def clean_orders(
    orders_df: pd.DataFrame,
    excluded_statuses: Iterable[str] = DEFAULT_EXCLUDED_STATUSES,
    sentinel: str = SENTINEL,
) -> pd.DataFrame:
    """
    Turn the raw order-line frame into the cleaned fact table.

    Malformed rows are excluded rather than failing the load; the number of
    rows removed at each step is logged so under-counting stays visible.
    The input frame is left untouched.
    """

    logger.info(f"Starting cleaning of {len(orders_df)} order lines")
    df = orders_df.copy()

    # --------------------------------------------------
    # 1. Identifiers as opaque text
    # --------------------------------------------------
    # Numeric-looking IDs must never be aggregated, so every key is text.
    # A line without an order_id cannot be counted and is excluded;
    # the other keys fall back to the sentinel and resolve to the
    # sentinel row of their dimension.
    for col in KEY_COLUMNS:
        df[col] = as_text(df[col])

    df = _drop(df, df[ORDER_ID].isna(), "missing order_id")

    for col in KEY_COLUMNS:
        df[col] = df[col].fillna(sentinel)

    # --------------------------------------------------
    # 2. Price as fixed-precision currency
    # --------------------------------------------------
    numeric_price = pd.to_numeric(df[PRICE], errors="coerce").astype("float64")
    invalid_price = numeric_price.isna() | np.isinf(numeric_price) | (numeric_price < 0)
    df = _drop(df, invalid_price, "unparseable or negative price")
    df[PRICE] = df[PRICE].map(_to_decimal).astype("object")

    # --------------------------------------------------
    # 3. Timestamps
    # --------------------------------------------------
    # Unparseable purchase timestamps exclude the row; a missing delivery
    # timestamp is kept as NaT (order not delivered yet). Values with a UTC
    # offset are normalized to naive UTC so mixed inputs share one dtype.
    df[PURCHASE_TS] = _to_timestamps(df[PURCHASE_TS])
    df = _drop(df, df[PURCHASE_TS].isna(), "unparseable purchase timestamp")

    if DELIVERED_TS in df.columns:
        df[DELIVERED_TS] = _to_timestamps(df[DELIVERED_TS])
    else:
        df[DELIVERED_TS] = pd.NaT

    # --------------------------------------------------
    # 4. Status filter
    # --------------------------------------------------
    excluded = {str(status).strip().lower() for status in excluded_statuses}
    df[ORDER_STATUS] = as_text(df[ORDER_STATUS]).str.lower().fillna(sentinel)
    df = _drop(df, df[ORDER_STATUS].isin(excluded), f"status in {sorted(excluded)}")
    logger.info(f"Filtered: {len(df)} order lines retained after status filter")

    # --------------------------------------------------
    # 5. Sentinel for missing categorical attributes
    # --------------------------------------------------
    for col in CATEGORICAL_COLUMNS:
        if col in df.columns:
            df[col] = as_text(df[col]).fillna(sentinel)
        else:
            df[col] = sentinel

    # --------------------------------------------------
    # 6. Final column selection
    # --------------------------------------------------
    fact_df = df[FACT_COLUMNS].reset_index(drop=True)
    logger.info(f"Cleaning completed: {len(fact_df)} fact rows ready for the model")

    return fact_df
