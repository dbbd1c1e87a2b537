import logging
import os
import sys

LOG_LEVEL_ENV = "ECOMMERCE_BI_LOG_LEVEL"


def setup_logger(name: str = "ecommerce_bi") -> logging.Logger:
    """
    Configure and return a logger instance for the model build.
    The level defaults to INFO and can be overridden with ECOMMERCE_BI_LOG_LEVEL.
    """
    logger = logging.getLogger(name)
    logger.setLevel(os.getenv(LOG_LEVEL_ENV, "INFO").upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        logger.addHandler(handler)

    return logger
