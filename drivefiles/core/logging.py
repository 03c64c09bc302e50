"""Logging setup for applications embedding drivefiles."""
import logging

from drivefiles.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging from settings.

    Args:
        level: Log level name; defaults to settings.log_level.
    """
    level_name = (level or settings.log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
