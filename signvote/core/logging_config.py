"""
JSON logging for the signature service
"""
import logging
import sys
from pythonjsonlogger import jsonlogger

from .correlation import CorrelationIdFilter

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s %(correlation_id)s"
QUIET_LOGGERS = ("urllib3", "sqlalchemy.engine")


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Route all records to stdout as one JSON object per line

    Records logged inside a request are tagged with that request's
    X-Correlation-Id; startup and shutdown records pass their own.
    Unknown level names fall back to INFO.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
    handler.addFilter(CorrelationIdFilter())

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    # Replace rather than stack handlers when called more than once
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
