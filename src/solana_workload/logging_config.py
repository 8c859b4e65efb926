import logging
import logging.config
import os
import sys
from pathlib import Path


def build_logging_config(level: str = "INFO", log_file: Path | str | None = None) -> dict:
    # stdout carries the report, logs go to stderr
    handlers = ["console"]
    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)-6s %(name)8s:%(lineno)d %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": sys.stderr,
            },
        },
        "loggers": {
            "solana_workload": {
                "level": level.upper(),
                "handlers": handlers,
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "WARNING",
                "handlers": handlers,
                "propagate": False,
            },
            # httpx logs every request at INFO
            "httpx": {
                "level": "WARNING",
                "handlers": handlers,
                "propagate": False,
            },
            "httpcore": {
                "level": "WARNING",
                "handlers": handlers,
                "propagate": False,
            },
        },
        "root": {
            "level": "WARNING",
            "handlers": handlers,
        },
    }
    if log_file is not None:
        config["handlers"]["file"] = {
            "class": "logging.FileHandler",
            "formatter": "default",
            "filename": str(log_file),
            "mode": "a",
        }
        handlers.append("file")
    return config


def setup_logging(level: str | None = None, log_file: Path | str | None = None) -> None:
    """Apply the logging configuration."""
    level = level or os.getenv("LOG_LEVEL", "INFO")
    logging.config.dictConfig(build_logging_config(level, log_file))
