from decimal import Decimal

import pandas as pd
from pandera.pandas import Check, Column, DataFrameSchema

from ecommerce_bi.columns import (
    CUSTOMER_ID,
    DELIVERED_TS,
    DIMENSIONS,
    ORDER_ID,
    ORDER_STATUS,
    PRICE,
    PRODUCT_ID,
    PURCHASE_DATE_KEY,
    PURCHASE_MINUTE,
    PURCHASE_TS,
    SELLER_ID,
)

# Timestamp resolution differs across pandas versions, so check the kind only
is_datetime = Check(lambda s: pd.api.types.is_datetime64_any_dtype(s), name="is_datetime")
is_date_key = Check.str_matches(r"^\d{8}$")


def _steps_by(column: str, step: pd.Timedelta) -> Check:
    return Check(
        lambda df: bool((pd.to_datetime(df[column]).diff().dropna() == step).all()),
        name=f"{column}_contiguous",
    )


fact_orders_schema = DataFrameSchema(
    {
        # Keys
        ORDER_ID: Column(str, nullable=False),
        PRODUCT_ID: Column(str, nullable=False),
        CUSTOMER_ID: Column(str, nullable=False),
        SELLER_ID: Column(str, nullable=False),

        # Measures
        PRICE: Column(
            checks=Check(lambda v: isinstance(v, Decimal) and v >= 0, element_wise=True),
            nullable=False,
        ),
        ORDER_STATUS: Column(str, nullable=False),

        # Time
        PURCHASE_TS: Column(checks=is_datetime, nullable=False),
        DELIVERED_TS: Column(checks=is_datetime, nullable=True),
        PURCHASE_DATE_KEY: Column(str, is_date_key, nullable=False),
        PURCHASE_MINUTE: Column(checks=is_datetime, nullable=False),
    },
    strict=True
)


def dimension_schema(key: str, attributes: list[str]) -> DataFrameSchema:
    return DataFrameSchema(
        {
            key: Column(str, nullable=False, unique=True),
            **{col: Column(str, nullable=False) for col in attributes},
        },
        strict=True
    )


dimension_schemas = {
    f"dim_{name}": dimension_schema(key, attributes)
    for name, (key, attributes) in DIMENSIONS.items()
}


calendar_schema = DataFrameSchema(
    {
        "date": Column(nullable=False, unique=True),
        "date_key": Column(str, is_date_key, nullable=False, unique=True),
        "year": Column(int, nullable=False),
        "month": Column(int, Check.in_range(1, 12), nullable=False),
        "day": Column(int, Check.in_range(1, 31), nullable=False),
        "month_name": Column(str, nullable=False),
        "month_short": Column(str, nullable=False),
        "month_year": Column(str, nullable=False),
        "quarter": Column(str, Check.isin(["Q1", "Q2", "Q3", "Q4"]), nullable=False),
        "weekday": Column(int, Check.in_range(0, 6), nullable=False),
        "weekday_name": Column(str, nullable=False),
        "is_weekend": Column(bool, nullable=False),
        "year_month": Column(int, nullable=False),
    },
    checks=_steps_by("date", pd.Timedelta(days=1)),
    strict=True
)


datetime_schema = DataFrameSchema(
    {
        "datetime": Column(checks=is_datetime, nullable=False, unique=True),
        "date": Column(nullable=False),
        "time": Column(nullable=False),
        "hour": Column(int, Check.in_range(0, 23), nullable=False),
        "minute": Column(int, Check.in_range(0, 59), nullable=False),
        "second": Column(int, Check.in_range(0, 59), nullable=False),
        "hour_bucket": Column(str, Check.str_matches(r"^\d{2}:00$"), nullable=False),
        "date_key": Column(str, is_date_key, nullable=False),
    },
    checks=_steps_by("datetime", pd.Timedelta(minutes=1)),
    strict=True
)


model_schemas = {
    "fact_orders": fact_orders_schema,
    **dimension_schemas,
    "dim_calendar": calendar_schema,
    "dim_datetime": datetime_schema,
}
