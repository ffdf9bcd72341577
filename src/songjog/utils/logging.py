"""Logging helpers shared by every songjog module."""

import logging
import os
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging once per process.

    Level resolution order: explicit argument, SONGJOG_LOG_LEVEL env var, WARNING.
    """
    global _configured
    if _configured:
        return
    level_name = (level or os.environ.get("SONGJOG_LOG_LEVEL") or "WARNING").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.WARNING), format=DEFAULT_FORMAT)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
