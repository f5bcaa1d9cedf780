"""Logging setup shared by the API and the dev scripts."""

import logging
import os


def configure_logging(level: str = None) -> None:
    """Apply the standard log format; level defaults to $LOG_LEVEL or INFO."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
