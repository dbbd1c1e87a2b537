"""
Export path helpers.

Table file names are built in one place so the pipeline, the DAG and the
tests agree on where each table lands.
"""

from pathlib import Path

EXPORT_FORMATS = ("csv", "parquet")


def _normalize_format(fmt: str) -> str:
    fmt = (fmt or "").strip().lower().lstrip(".")
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format '{fmt}'. Expected one of {EXPORT_FORMATS}")
    return fmt


def build_table_path(output_folder: str, table_name: str, fmt: str = "csv") -> Path:
    """
    Build the file path for one exported table.

    Example:
        build_table_path("data/model", "dim_calendar", "parquet")
        -> Path("data/model/dim_calendar.parquet")
    """

    return Path(output_folder) / f"{table_name.strip('/')}.{_normalize_format(fmt)}"


def detect_format(path: str) -> str:
    """
    Infer the file format from a path suffix.

    Example:
        detect_format("exports/orders.PARQUET") -> "parquet"
    """

    return _normalize_format(Path(path).suffix)
