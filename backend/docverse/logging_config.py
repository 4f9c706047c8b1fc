"""
Logging setup for the DocVerse backend.
"""

import logging
import sys

from pythonjsonlogger import jsonlogger

from docverse.config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s - %(message)s"

_logging_configured = False


def setup_logging(settings: Settings) -> None:
    """Configure the root logger once per process."""
    global _logging_configured
    if _logging_configured:
        return

    level = getattr(logging, settings.log_level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if settings.is_production:
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            timestamp=True,
        )
    else:
        formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    _logging_configured = True
