"""
Shared utilities for the model build.

Keep helpers here small and dependency-light so DAG parsing stays reliable.
"""

from .config import load_config
from .paths import build_table_path, detect_format

__all__ = ["load_config", "build_table_path", "detect_format"]
