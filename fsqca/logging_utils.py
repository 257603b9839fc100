# fsqca/logging_utils.py
import logging
import logging.config
from pathlib import Path
from typing import Optional

LOGGER_NAME = "fsqca"


def setup_logging(
    level: str = "INFO",
    console: bool = True,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Level for the ``fsqca`` logger
        console: Whether to log to stderr
        log_file: Optional path; the file handler captures everything
    """
    handlers = {}
    if console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "level": level,
        }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "plain",
            "filename": str(log_file),
            "encoding": "utf-8",
            "mode": "w",
            "level": "DEBUG",
        }

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {
                "format": "{asctime} {levelname:<7} {name} - {message}",
                "style": "{",
            },
            "console": {
                "format": "{levelname:<7} {message}",
                "style": "{",
            },
        },
        "handlers": handlers,
        "loggers": {
            LOGGER_NAME: {
                "level": "DEBUG" if log_file else level,
                "handlers": list(handlers),
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(config)
    logging.captureWarnings(True)

    logger = logging.getLogger(LOGGER_NAME)
    if log_file:
        logger.info("Logging initialised. File: %s", log_file)
    return logger
