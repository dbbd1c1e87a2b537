import pandas as pd

from ecommerce_bi.columns import DIMENSIONS
from ecommerce_bi.logger import setup_logger

logger = setup_logger("model.dimensions")


def build_dimension(facts_df: pd.DataFrame, key: str, attributes: list[str]) -> pd.DataFrame:
    """
    Project `key` and its descriptive attributes out of the fact table and
    keep one row per key. When a key carries conflicting attributes the
    first row seen wins.
    """
    columns = [key] + [col for col in attributes if col in facts_df.columns]
    dim = (
        facts_df[columns]
        .drop_duplicates(subset=key, keep="first")
        .reset_index(drop=True)
    )
    return dim


def build_dimensions(facts_df: pd.DataFrame) -> dict[str, pd.DataFrame]:
    """Build the Product, Customer and Seller dimensions from the cleaned facts."""
    dims = {}
    for name, (key, attributes) in DIMENSIONS.items():
        dims[name] = build_dimension(facts_df, key, attributes)
        logger.info(f"dim_{name}: {len(dims[name])} distinct {key} values")
    return dims
