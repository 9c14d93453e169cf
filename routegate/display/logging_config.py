"""Logging configuration setup."""

import copy
import logging
import logging.config
import sys
from typing import Optional

from routegate.constants import DEFAULT_LOG_LEVEL

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

BASE_LOG_CFG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": ("%(asctime)s - %(name)25s:%(lineno)-4d - " "%(levelname)-7s - %(message)s"),
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "console_handler": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "simple",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "routegate": {
            "handlers": ["console_handler"],
            "propagate": False,
            "level": DEFAULT_LOG_LEVEL,
        },
        "starlette": {
            "handlers": ["console_handler"],
            "propagate": False,
            "level": "WARNING",
        },
    },
    "root": {
        "handlers": ["console_handler"],
        "level": "WARNING",
    },
}


def setup_logging(log_lvl_str: str, log_file: Optional[str] = None) -> str:
    """
    Set up the logging system.

    Args:
        log_lvl_str: The desired log level string (e.g., 'debug', 'info').
            Invalid values fall back to INFO.
        log_file: Optional path of an additional log file.

    Returns:
        The validated log level.
    """
    log_lvl_valid = log_lvl_str.upper()
    if log_lvl_valid not in VALID_LEVELS:
        print(f"Warning: invalid log level '{log_lvl_str}'. Using 'INFO'.", file=sys.stderr)
        log_lvl_valid = "INFO"

    log_cfg: dict = copy.deepcopy(BASE_LOG_CFG)
    log_cfg["loggers"]["routegate"]["level"] = log_lvl_valid
    if log_lvl_valid == "DEBUG":
        log_cfg["loggers"]["starlette"]["level"] = "DEBUG"
        log_cfg["root"]["level"] = "DEBUG"

    if log_file:
        log_cfg["handlers"]["file_handler"] = {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "simple",
            "filename": log_file,
            "encoding": "utf-8",
        }
        for logger_cfg in (*log_cfg["loggers"].values(), log_cfg["root"]):
            logger_cfg["handlers"].append("file_handler")

    logging.config.dictConfig(log_cfg)
    logging.getLogger(__name__).debug(
        "Logging initialized. Level: %s, log file: %s", log_lvl_valid, log_file or "-"
    )
    return log_lvl_valid
