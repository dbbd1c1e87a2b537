from pathlib import Path

import pandas as pd

from ecommerce_bi.logger import setup_logger
from ecommerce_bi.model.star import StarModel
from ecommerce_bi.utils.paths import build_table_path

logger = setup_logger("etl.export")


def write_table(df: pd.DataFrame, path: Path) -> Path:
    """
    Write one model table as CSV or Parquet, chosen by the path suffix.
    Prices stay Decimal: written as text in CSV and decimal128 in Parquet.
    """
    path = Path(path)
    logger.info(f"Writing {len(df)} rows to {path}")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if path.suffix == ".parquet":
            df.to_parquet(path, index=False)
        else:
            df.to_csv(path, index=False)

    except OSError as e:
        logger.error(f"Could not write {path}: {e}")
        raise RuntimeError(f"Failed to export table to {path}: {e}") from e

    return path


def export_model(model: StarModel, output_folder: str, fmt: str = "csv") -> dict[str, Path]:
    """
    Bulk export every table of the model into `output_folder`.
    Returns table name -> written path.
    """
    if not output_folder:
        raise ValueError("Output folder must not be empty")

    written = {}
    for name, table in model.tables().items():
        written[name] = write_table(table, build_table_path(output_folder, name, fmt))

    logger.info(f"Exported {len(written)} tables to {output_folder}")
    return written
