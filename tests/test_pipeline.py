"""
Tests for configuration, path helpers and the end-to-end pipeline.
"""

import importlib.util
import pytest
import pandas as pd
import yaml
from decimal import Decimal
from pathlib import Path
import sys

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ecommerce_bi.pipeline import run_pipeline
from ecommerce_bi.utils.config import DEFAULT_CONFIG, load_config
from ecommerce_bi.utils.paths import build_table_path, detect_format

DAG_PATH = Path(__file__).parent.parent / "dags" / "ecommerce_bi_dag.py"


class TestConfig:
    """Test suite for load_config."""

    def test_missing_file_returns_defaults(self, tmp_path):
        """Test that a missing config file yields the defaults."""
        assert load_config(tmp_path / "absent.yaml") == DEFAULT_CONFIG

    def test_partial_file_merges_over_defaults(self, tmp_path):
        """Test that keys omitted from the YAML keep their defaults."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"export": {"format": "parquet"}}))

        config = load_config(path)
        assert config["export"]["format"] == "parquet"
        assert config["export"]["output_folder"] == "data/model/"
        assert config["cleaning"]["excluded_statuses"] == ["canceled", "unavailable"]
        assert config["cleaning"]["sentinel"] == "N/A"

    def test_empty_file_returns_defaults(self, tmp_path):
        """Test that an empty YAML file is accepted."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == DEFAULT_CONFIG

    def test_defaults_not_shared(self, tmp_path):
        """Test that mutating a loaded config leaves the defaults intact."""
        config = load_config(tmp_path / "absent.yaml")
        config["cleaning"]["excluded_statuses"].append("shipped")
        assert DEFAULT_CONFIG["cleaning"]["excluded_statuses"] == ["canceled", "unavailable"]

    def test_packaged_config_loads(self):
        """Test that the bundled config.yaml parses."""
        config = load_config()
        assert config["input"]["column_map"]["category"] == "product_category_name"


class TestPaths:
    """Test suite for export path helpers."""

    def test_build_table_path(self):
        """Test file naming for each format."""
        assert build_table_path("data/model/", "dim_calendar", "PARQUET") == Path("data/model/dim_calendar.parquet")
        assert build_table_path("data/model", "fact_orders") == Path("data/model/fact_orders.csv")

    def test_build_table_path_rejects_unknown_format(self):
        """Test that unsupported formats raise."""
        with pytest.raises(ValueError):
            build_table_path("data/model", "fact_orders", "json")

    def test_detect_format(self):
        """Test format detection from the suffix."""
        assert detect_format("exports/orders.CSV") == "csv"
        assert detect_format("exports/orders.parquet") == "parquet"


class TestRunPipeline:
    """Test suite for run_pipeline."""

    @pytest.fixture
    def pipeline_config(self, raw_orders_df, tmp_path):
        """Config pointing at a CSV export with source-style headers."""
        export = raw_orders_df.rename(columns={
            "order_id": "Order ID",
            "product_category_name": "Category",
        })
        input_path = tmp_path / "orders.csv"
        export.to_csv(input_path, index=False)

        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.safe_dump({
            "input": {"path": str(input_path), "column_map": {"category": "product_category_name"}},
            "export": {"output_folder": str(tmp_path / "model"), "format": "csv"},
        }))
        return load_config(config_path)

    def test_pipeline_builds_model(self, pipeline_config):
        """Test the end-to-end build from a CSV export."""
        model = run_pipeline(pipeline_config)
        assert len(model.facts) == 4
        assert model.evaluate("Total Sales") == Decimal("42.75")
        assert model.evaluate("Total Orders") == 3

    def test_pipeline_exports_tables(self, pipeline_config):
        """Test that every table lands in the output folder."""
        model = run_pipeline(pipeline_config)
        output_folder = Path(pipeline_config["export"]["output_folder"])
        for name, table in model.tables().items():
            path = output_folder / f"{name}.csv"
            assert path.exists()
            assert len(pd.read_csv(path)) == len(table)

    def test_pipeline_without_export(self, pipeline_config):
        """Test that export can be skipped."""
        run_pipeline(pipeline_config, export=False)
        assert not Path(pipeline_config["export"]["output_folder"]).exists()

    def test_pipeline_is_idempotent(self, pipeline_config):
        """Test that two runs over the same export produce identical tables."""
        first = run_pipeline(pipeline_config, export=False).tables()
        second = run_pipeline(pipeline_config, export=False).tables()
        for name in first:
            pd.testing.assert_frame_equal(first[name], second[name])


@pytest.mark.integration
class TestDag:
    """Integration tests for the Airflow DAG (requires the airflow extra)."""

    def test_dag_parses(self):
        """Test that the DAG module imports and registers its tasks."""
        pytest.importorskip("airflow")
        spec = importlib.util.spec_from_file_location("ecommerce_bi_dag", DAG_PATH)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        dag = module.ecommerce_bi_model()
        assert dag.dag_id == "ecommerce_bi_model"
        assert set(dag.task_ids) == {
            "extract_and_validate_orders",
            "clean_orders",
            "build_and_export_model",
        }


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
