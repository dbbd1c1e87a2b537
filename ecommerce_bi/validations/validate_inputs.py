import pandas as pd
from pandera.errors import SchemaError, SchemaErrors

from ecommerce_bi.logger import setup_logger
from .input_schemas import orders_schema

logger = setup_logger("validation.input")


def _drop_failed_rows(df: pd.DataFrame, failed: pd.DataFrame) -> pd.DataFrame:
    # Column-level failures (missing column, wrong dtype) carry no row index
    failed_indices = failed["index"].dropna().unique()
    if len(failed_indices) > 0:
        return df.drop(index=failed_indices)
    return df.copy()


def validate_orders(df: pd.DataFrame) -> tuple[pd.DataFrame, int]:
    """
    Check the raw order lines and drop the rows that fail.
    Returns the remaining rows and the number of rows dropped.
    """
    logger.info(f"Starting orders validation on {len(df)} rows")
    try:
        validated_df = orders_schema.validate(df, lazy=True)
        logger.info("Orders validation passed")
        return validated_df, 0

    except SchemaErrors as err:
        failed = err.failure_cases
        logger.warning(f"Orders validation failed: {len(failed)} issues")
        logger.warning(f"Errors summary:\n{failed.groupby(['column', 'check']).size()}")

        clean_df = _drop_failed_rows(df, failed)
        dropped = len(df) - len(clean_df)

        try:
            clean_df = orders_schema.validate(clean_df)  # re-validate clean data
            logger.info(f"Cleaned orders: {len(clean_df)} rows remaining ({dropped} dropped)")
        except (SchemaError, SchemaErrors):
            logger.warning("Could not clean all invalid rows. Returning best effort.")

        return clean_df, dropped
