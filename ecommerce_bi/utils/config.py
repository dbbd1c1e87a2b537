"""
Configuration loading.

The YAML file only needs the keys it overrides; everything else falls back to
DEFAULT_CONFIG.
"""

import copy
from pathlib import Path
from typing import Any, Optional

import yaml

CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "input": {
        "path": "data/raw/ecommerce_orders.csv",
        "column_map": {},
    },
    "cleaning": {
        "excluded_statuses": ["canceled", "unavailable"],
        "sentinel": "N/A",
    },
    "export": {
        "output_folder": "data/model/",
        "format": "csv",
    },
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: Optional[Path] = None) -> dict[str, Any]:
    """
    Load the YAML config at `path` (package config.yaml by default) merged
    over DEFAULT_CONFIG. A missing or empty file yields the defaults.
    """
    config_path = Path(path) if path else CONFIG_PATH
    if not config_path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(config_path) as f:
        loaded = yaml.safe_load(f) or {}

    return _merge(DEFAULT_CONFIG, loaded)
