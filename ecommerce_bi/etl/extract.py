from pathlib import Path
from typing import Optional

import pandas as pd

from ecommerce_bi.columns import KEY_COLUMNS, REQUIRED_COLUMNS
from ecommerce_bi.etl.clean import as_text
from ecommerce_bi.logger import setup_logger
from ecommerce_bi.utils.paths import detect_format

logger = setup_logger("etl.extract")


class MissingColumnsError(ValueError):
    """Raised when the export lacks required columns after mapping."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Order export is missing required columns: {missing}")


def normalize_columns(df: pd.DataFrame, column_map: Optional[dict[str, str]] = None) -> pd.DataFrame:
    """
    Lower-case headers, replace spaces with underscores and rename through
    the consumer's column map (keys are matched after normalization).
    """
    df = df.copy()
    df.columns = df.columns.str.strip().str.lower().str.replace(" ", "_")

    if column_map:
        mapping = {
            str(source).strip().lower().replace(" ", "_"): target
            for source, target in column_map.items()
        }
        df = df.rename(columns=mapping)

    return df


def load_orders(path: str, column_map: Optional[dict[str, str]] = None) -> pd.DataFrame:
    """
    Load the flat order-line export (CSV or Parquet) into a DataFrame.
    Identifier columns are kept as text so they are never summed.
    """
    path = Path(path)
    fmt = detect_format(str(path))
    logger.info(f"Loading orders from {path} ({fmt})")

    if fmt == "csv":
        # Every column comes in as text; cleaning coerces prices and timestamps
        df = pd.read_csv(path, dtype=str, keep_default_na=True)
    else:
        df = pd.read_parquet(path)

    logger.info(f"Successfully loaded {len(df)} order lines")

    df = normalize_columns(df, column_map)
    logger.info(f"Normalized columns: {list(df.columns)}")

    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        logger.error(f"Required columns not found after mapping: {missing}")
        raise MissingColumnsError(missing)

    for col in KEY_COLUMNS:
        df[col] = as_text(df[col])

    return df
