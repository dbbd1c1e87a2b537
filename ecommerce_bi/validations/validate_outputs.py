from pandera.errors import SchemaErrors

from ecommerce_bi.logger import setup_logger
from ecommerce_bi.model.star import StarModel
from .output_schemas import model_schemas

logger = setup_logger("validation.output")


def validate_model(model: StarModel) -> dict[str, int]:
    """
    Validate every table of the assembled model before export.

    Nothing is dropped here: removing a calendar day or a dimension row
    would break the model's own guarantees, so failures are logged and
    counted per table instead.
    """
    issues = {}
    for name, table in model.tables().items():
        if table.empty:
            logger.warning(f"{name} is empty, skipping validation")
            issues[name] = 0
            continue

        try:
            model_schemas[name].validate(table, lazy=True)
            issues[name] = 0
        except SchemaErrors as err:
            failed = err.failure_cases
            issues[name] = len(failed)
            logger.error(f"{name} failed output validation with {len(failed)} issues")
            logger.error(f"Failure summary:\n{failed.groupby(['column', 'check']).size()}")

    total = sum(issues.values())
    if total == 0:
        logger.info(f"Output validation passed for {len(issues)} tables")
    return issues
