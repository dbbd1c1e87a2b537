from datetime import datetime, timedelta
from typing import Any

from airflow.decorators import dag, task
from airflow.exceptions import AirflowException

from ecommerce_bi.logger import setup_logger
from ecommerce_bi.utils.config import load_config

config = load_config()

INPUT_CONFIG = config["input"]
CLEANING_CONFIG = config["cleaning"]
EXPORT_CONFIG = config["export"]
OUTPUT_FOLDER = EXPORT_CONFIG["output_folder"]
EXPORT_FORMAT = EXPORT_CONFIG.get("format", "csv")

# Default arguments for DAG
DEFAULT_ARGS = {
    "owner": "data-engineering",
    "email_on_failure": False,
    "email_on_retry": False,
    "retries": 1,
    "retry_delay": timedelta(minutes=5),
    "execution_timeout": timedelta(hours=1),
}


@dag(
    dag_id="ecommerce_bi_model",
    description="""
    E-commerce BI model - rebuilds the star schema behind the sales report
    from the order-line export.

    Data Flow:
    1. Extract: Load the order export (CSV or Parquet)
    2. Validate: Drop rows missing order id, status, price or purchase time
    3. Clean: Coerce types, drop excluded statuses, fill "N/A" sentinels
    4. Model: Build dimensions, calendar, datetime and validate all tables
    5. Export: Write every table to the model folder
    """,
    start_date=datetime(2026, 1, 1),
    schedule="@daily",
    catchup=False,
    max_active_runs=1,
    default_args=DEFAULT_ARGS,
    tags=["ecommerce", "bi", "star-schema"],
)
def ecommerce_bi_model():
    """
    Rebuilds all model tables wholesale on each run; there is no incremental state.
    """
    from ecommerce_bi.etl.clean import clean_orders
    from ecommerce_bi.etl.export import export_model
    from ecommerce_bi.etl.extract import load_orders
    from ecommerce_bi.model.star import build_model
    from ecommerce_bi.validations.validate_inputs import validate_orders
    from ecommerce_bi.validations.validate_outputs import validate_model

    logger = setup_logger("dags.ecommerce_bi_model")

    @task(task_id="extract_and_validate_orders")
    def extract_and_validate():
        """Load the export and drop rows failing the input schema"""
        try:
            orders_df = load_orders(INPUT_CONFIG["path"], column_map=INPUT_CONFIG.get("column_map"))
            valid_df, dropped = validate_orders(orders_df)
        except Exception as e:
            logger.error(f"✗ Extraction failed: {str(e)}")
            raise AirflowException(f"Order extraction failed: {str(e)}")

        logger.info(f"✓ {len(valid_df)} order lines valid ({dropped} dropped)")
        if valid_df.empty:
            raise AirflowException("Validation resulted in empty dataset")
        return valid_df

    @task(task_id="clean_orders")
    def clean(orders_df: Any):
        """Turn raw order lines into fact rows"""
        facts_df = clean_orders(
            orders_df,
            excluded_statuses=CLEANING_CONFIG["excluded_statuses"],
            sentinel=CLEANING_CONFIG["sentinel"],
        )
        logger.info(f"✓ Cleaning completed: {len(facts_df)} fact rows")
        return facts_df

    @task(
        task_id="build_and_export_model",
        doc_md="""
        Builds the star model, validates every table and exports it to
        {output_folder} as {fmt}.
        """.format(output_folder=OUTPUT_FOLDER, fmt=EXPORT_FORMAT),
    )
    def build_and_export(facts_df: Any):
        """Assemble, validate and export the model"""
        model = build_model(facts_df)

        issues = validate_model(model)
        for name, count in issues.items():
            if count:
                logger.warning(f"  ⚠ {name}: {count} validation issues")

        try:
            written = export_model(model, OUTPUT_FOLDER, EXPORT_FORMAT)
        except (RuntimeError, ValueError) as e:
            logger.error(f"✗ Export failed: {str(e)}")
            raise AirflowException(f"Model export failed: {str(e)}")

        return {name: str(path) for name, path in written.items()}

    # Define task dependencies
    build_and_export(clean(extract_and_validate()))


# Instantiate DAG
ecommerce_bi_model()
