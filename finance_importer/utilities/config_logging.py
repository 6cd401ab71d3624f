# finance_importer/utilities/config_logging.py
import logging.config
from pathlib import Path

LOG_FILE = "logs/finance_import.log"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(levelname)s %(name)s: %(message)s"},
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s:%(lineno)d %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "simple",
        },
        "file": {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "verbose",
            "filename": LOG_FILE,
            "maxBytes": 2_000_000,
            "backupCount": 3,
            "encoding": "utf-8",
        },
    },
    "loggers": {
        "": {
            "level": "INFO",
            "handlers": ["console", "file"],
        },
        # step transitions and per-row decisions are logged at DEBUG
        "finance_importer": {"level": "DEBUG", "propagate": True},
        # pandas' python CSV engine is chatty at DEBUG
        "pandas": {"level": "WARNING", "propagate": True},
    },
}


def configure_logging(config: dict = LOGGING) -> None:
    """Apply a dictConfig, creating the rotating file's directory first."""
    file_handler = config.get("handlers", {}).get("file")
    if file_handler and file_handler.get("filename"):
        Path(file_handler["filename"]).parent.mkdir(parents=True, exist_ok=True)
    logging.config.dictConfig(config)
