from pandera.pandas import Column, DataFrameSchema

from ecommerce_bi.columns import (
    CATEGORICAL_COLUMNS,
    CUSTOMER_ID,
    DELIVERED_TS,
    ORDER_ID,
    ORDER_STATUS,
    PRICE,
    PRODUCT_ID,
    PURCHASE_TS,
    SELLER_ID,
)

# Raw values are loosely typed text; coercion happens in etl.clean.
# Only row-level presence is checked here so failing rows can be dropped.
orders_schema = DataFrameSchema(
    {
        # Identifiers
        ORDER_ID: Column(nullable=False),
        PRODUCT_ID: Column(nullable=True),  # Missing keys become the sentinel
        CUSTOMER_ID: Column(nullable=True),
        SELLER_ID: Column(nullable=True),

        # Order info
        PRICE: Column(nullable=False),
        ORDER_STATUS: Column(nullable=False),

        # Timestamps
        PURCHASE_TS: Column(nullable=False),
        DELIVERED_TS: Column(nullable=True, required=False),  # Undelivered orders

        # Descriptive attributes
        **{col: Column(nullable=True, required=False) for col in CATEGORICAL_COLUMNS},
    },
    strict=False  # Allow extra columns (dropped during cleaning)
)
