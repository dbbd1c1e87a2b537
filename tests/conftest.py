"""
Pytest configuration and fixtures for the model tests.

This file is automatically discovered by pytest and provides
shared fixtures and configuration for all test modules.
"""

import pytest
import sys
import pandas as pd
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ecommerce_bi.etl.clean import clean_orders
from ecommerce_bi.model.star import build_model


@pytest.fixture
def raw_orders_df():
    """
    Raw order lines as loaded from the export (all text).

    After cleaning: o3 (canceled) and o6 (unavailable) are excluded by status,
    o4 by its unparseable price, leaving four lines over three orders.
    """
    return pd.DataFrame({
        "order_id": ["o1", "o1", "o2", "o3", "o4", "o5", "o6"],
        "product_id": ["p1", "p2", "p3", "p2", "p4", "p1", "p5"],
        "customer_id": ["c1", "c1", "c2", "c3", "c2", "c4", "c5"],
        "seller_id": ["s1", "s2", "s1", "s2", "s1", "s3", "s1"],
        "price": ["10.00", "5.50", "20", "30.00", "abc", "7.25", "12.00"],
        "order_status": ["delivered", "delivered", "shipped", "canceled", "delivered", "Delivered", "unavailable"],
        "order_purchase_timestamp": [
            "2017-01-02 10:15:30",
            "2017-01-02 10:15:30",
            "2017-01-04 23:50:00",
            "2017-01-03 09:00:00",
            "2017-01-04 11:00:00",
            "2017-01-06 08:00:00",
            "2017-01-09 08:00:00",
        ],
        "order_delivered_customer_date": [
            "2017-01-05 09:00:00",
            "2017-01-04 12:00:00",
            None,
            None,
            "2017-01-08 10:00:00",
            "2017-01-07 00:10:00",
            None,
        ],
        "product_category_name": ["toys", "books", None, "books", "garden", "toys", "toys"],
        "customer_city": ["sao paulo", "sao paulo", "rio de janeiro", "belo horizonte", "rio de janeiro", "uberlandia", "recife"],
        "customer_state": ["SP", "SP", "RJ", "MG", "RJ", "MG", "PE"],
        "seller_city": ["curitiba", "niteroi", "curitiba", "niteroi", "curitiba", "santos", "curitiba"],
        "seller_state": ["PR", "RJ", "PR", "RJ", "PR", "SP", "PR"],
    })


@pytest.fixture
def facts_df(raw_orders_df):
    """Cleaned fact rows built from raw_orders_df."""
    return clean_orders(raw_orders_df)


@pytest.fixture
def model(facts_df):
    """Star model assembled from facts_df."""
    return build_model(facts_df)


# Add pytest CLI options
def pytest_addoption(parser):
    """Add custom pytest options."""
    parser.addoption(
        "--integration",
        action="store_true",
        default=False,
        help="Run integration tests (requires the airflow extra)"
    )


def pytest_collection_modifyitems(config, items):
    """Mark integration tests for conditional execution."""
    if config.getoption("--integration"):
        # Run all tests
        return

    # Skip integration tests if flag not provided
    skip_integration = pytest.mark.skip(reason="need --integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)
