"""Logging setup for the group log bot.

Console output for operators plus an optional rotating JSON log file.
"""

import json
import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Any, Dict

from logsbot.config import LogsBotConfig

LOGGER_NAME = "logsbot"
LOG_FILE_NAME = "logsbot.log"

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, carrying any `extra=` context (thread_id, kind, ...)."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        # Non-JSON values (paths, enums) are stringified
        return json.dumps(entry, default=str)


def setup_logging(config: LogsBotConfig) -> logging.Logger:
    """Configure the ``logsbot`` logger hierarchy.

    Args:
        config: Bot configuration (log level, path and rotation settings)

    Returns:
        The configured package logger
    """
    level = getattr(logging, config.log_level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(console_handler)

    if config.log_path:
        try:
            os.makedirs(config.log_path, exist_ok=True)
            file_handler = RotatingFileHandler(
                os.path.join(config.log_path, LOG_FILE_NAME),
                maxBytes=config.log_file_max_bytes,
                backupCount=config.log_file_backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(JsonFormatter())
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not create log file: {e}. Logging to console only.")

    return logger
