"""
Canonical column names of the order-line export and of the derived tables.
"""

ORDER_ID = "order_id"
PRODUCT_ID = "product_id"
CUSTOMER_ID = "customer_id"
SELLER_ID = "seller_id"
PRICE = "price"
ORDER_STATUS = "order_status"
PURCHASE_TS = "order_purchase_timestamp"
DELIVERED_TS = "order_delivered_customer_date"
CATEGORY = "product_category_name"
CUSTOMER_CITY = "customer_city"
CUSTOMER_STATE = "customer_state"
SELLER_CITY = "seller_city"
SELLER_STATE = "seller_state"

KEY_COLUMNS = [ORDER_ID, PRODUCT_ID, CUSTOMER_ID, SELLER_ID]

REQUIRED_COLUMNS = KEY_COLUMNS + [PRICE, ORDER_STATUS, PURCHASE_TS]

CATEGORICAL_COLUMNS = [CATEGORY, CUSTOMER_CITY, CUSTOMER_STATE, SELLER_CITY, SELLER_STATE]

FACT_COLUMNS = REQUIRED_COLUMNS + [DELIVERED_TS] + CATEGORICAL_COLUMNS

# Added when the model is assembled
PURCHASE_DATE_KEY = "purchase_date_key"
PURCHASE_MINUTE = "purchase_minute"
PURCHASE_DATE = "purchase_date"

# Star-schema fact table: keys, measures and time keys only
FACT_TABLE_COLUMNS = REQUIRED_COLUMNS + [DELIVERED_TS, PURCHASE_DATE_KEY, PURCHASE_MINUTE]

# Dimension name -> (key, descriptive attributes)
DIMENSIONS = {
    "product": (PRODUCT_ID, [CATEGORY]),
    "customer": (CUSTOMER_ID, [CUSTOMER_CITY, CUSTOMER_STATE]),
    "seller": (SELLER_ID, [SELLER_CITY, SELLER_STATE]),
}

CALENDAR_COLUMNS = [
    "date",
    "date_key",
    "year",
    "month",
    "day",
    "month_name",
    "month_short",
    "month_year",
    "quarter",
    "weekday",
    "weekday_name",
    "is_weekend",
    "year_month",
]

DATETIME_COLUMNS = [
    "datetime",
    "date",
    "time",
    "hour",
    "minute",
    "second",
    "hour_bucket",
    "date_key",
]
