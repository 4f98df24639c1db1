"""
Logging utilities.

WHAT: Logging for the negotiation service
WHY: A run is a long chain of agent turns; the log is how a stalled or failed run gets explained
HOW: Root console + file handlers, package loggers under "cartai", chatty libraries held at WARNING
"""

import logging
import sys
from pathlib import Path

from ..core.config import settings

APP_LOGGER = "cartai"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# httpx logs every OpenRouter request at INFO, SQLAlchemy every statement when DEBUG is on
QUIET_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "sse_starlette")


def setup_logging():
    """
    Configure application logging.

    WHAT: Console handler at INFO, file handler at DEBUG, app loggers at LOG_LEVEL
    WHY: Per-round offer detail goes to the file without flooding the console
    HOW: Replace root handlers once at startup; third-party noise capped at WARNING
    """
    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(file_handler)

    logging.getLogger(APP_LOGGER).setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    get_logger(__name__).info(f"Logging initialized (level={settings.LOG_LEVEL}, file={log_file})")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Modules outside the package (scripts, tests) are nested under the app
    logger so LOG_LEVEL applies to them too.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance
    """
    if name != APP_LOGGER and not name.startswith(APP_LOGGER + "."):
        name = f"{APP_LOGGER}.{name}"
    return logging.getLogger(name)
