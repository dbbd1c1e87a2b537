from typing import Any, Optional

from ecommerce_bi.etl.clean import clean_orders
from ecommerce_bi.etl.export import export_model
from ecommerce_bi.etl.extract import load_orders
from ecommerce_bi.logger import setup_logger
from ecommerce_bi.model.star import StarModel, build_model
from ecommerce_bi.utils.config import load_config
from ecommerce_bi.validations.validate_inputs import validate_orders
from ecommerce_bi.validations.validate_outputs import validate_model

logger = setup_logger("pipeline")


def run_pipeline(config: Optional[dict[str, Any]] = None, export: bool = True) -> StarModel:
    """
    Load -> validate -> clean -> build model -> validate model -> export.

    Row-level problems never stop the run; they are dropped and logged.
    """
    config = config or load_config()
    input_cfg = config["input"]
    cleaning_cfg = config["cleaning"]
    export_cfg = config["export"]

    orders_df = load_orders(input_cfg["path"], column_map=input_cfg.get("column_map"))

    valid_df, dropped = validate_orders(orders_df)
    if dropped > 0:
        logger.warning(f"{dropped} order lines failed input validation and were excluded")

    facts_df = clean_orders(
        valid_df,
        excluded_statuses=cleaning_cfg["excluded_statuses"],
        sentinel=cleaning_cfg["sentinel"],
    )

    model = build_model(facts_df)

    issues = validate_model(model)
    failing = {name: count for name, count in issues.items() if count}
    if failing:
        logger.warning(f"Model tables with validation issues: {failing}")

    if export:
        export_model(model, export_cfg["output_folder"], export_cfg.get("format", "csv"))

    logger.info(f"Pipeline completed: {len(model.facts)} fact rows modelled")
    return model
