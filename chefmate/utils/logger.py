"""Logging infrastructure for ChefMate.

Provides structured JSON logging or colored text output, configured via
environment variables:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)
"""

import json
import logging
import os
import sys
from typing import Any


class JSONFormatter(logging.Formatter):
    """Formatter that outputs structured JSON."""

    # Optional record attributes copied into the JSON payload when present
    EXTRA_FIELDS = ("request_id", "user_id")

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON string with timestamp, level, logger name, message, and optional traceback.
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data)


class RichTextFormatter(logging.Formatter):
    """Formatter that outputs colored text with emoji icons."""

    # ANSI color codes
    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "RESET": "\033[0m",       # Reset
    }

    ICONS = {
        "DEBUG": "🔍",
        "INFO": "ℹ️",
        "WARNING": "⚠️",
        "ERROR": "❌",
    }

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        color = self.COLORS.get(level, self.COLORS["RESET"])
        icon = self.ICONS.get(level, "")
        reset = self.COLORS["RESET"]

        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")

        message = f"{color}{icon} {timestamp} {level:<8} {record.name:<20} {record.getMessage()}{reset}"

        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return message


def get_logger(name: str) -> logging.Logger:
    """Create and configure logger instance.

    Args:
        name: Logger name, typically module name.

    Returns:
        Configured logger instance.
    """
    logger_instance = logging.getLogger(name)

    # Return existing logger if already configured
    if logger_instance.handlers:
        return logger_instance

    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_type = os.getenv("LOG_TYPE", "text").lower()

    log_level = getattr(logging, log_level_str, logging.INFO)
    logger_instance.setLevel(log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if log_type == "json":
        formatter = JSONFormatter()
    else:
        formatter = RichTextFormatter()

    handler.setFormatter(formatter)
    logger_instance.addHandler(handler)

    return logger_instance


# Create module-level logger instance
logger = get_logger("chefmate")

# Suppress verbose informational logs from external libraries
logging.getLogger("google.genai").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
