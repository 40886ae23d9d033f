"""Logging configuration."""

import logging
import sys

from app.core.config import LogFormatEnum, settings

SIMPLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
JSON_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}'
)


def setup_logging() -> None:
    """Configure the root logger from settings.

    Safe to call more than once; handlers installed by a previous call are replaced.
    """
    fmt = JSON_FORMAT if settings.log_format == LogFormatEnum.json else SIMPLE_FORMAT
    logging.basicConfig(
        level=settings.log_level.value,
        format=fmt,
        stream=sys.stdout,
        force=True,
    )

    # SQL echo is controlled by settings.debug, keep the engine logger quiet otherwise
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )
    logging.getLogger("botocore").setLevel(logging.WARNING)
