"""Logging infrastructure for Recipe Finder.

One ``recipe_finder`` logger writes to stdout, configured from the environment:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text (colored single line per record) or json (one object per line)

Pipeline log calls attach the search ``query`` and the ``recipe_id`` being enriched
(``logger.warning(..., extra={"recipe_id": 42})``). JSON output carries them as
top-level keys; text output appends them as ``key=value`` pairs.
"""

import json
import logging
import os
import sys
from typing import Any

# Extra record attributes that identify which search / recipe a line belongs to
CONTEXT_FIELDS = ("query", "recipe_id")

# level -> (ANSI color, icon)
LEVEL_STYLES = {
    "DEBUG": ("\033[36m", "🔍"),
    "INFO": ("\033[32m", "✅"),
    "WARNING": ("\033[33m", "⚠️"),
    "ERROR": ("\033[31m", "❌"),
    "CRITICAL": ("\033[35m", "🔥"),
}
RESET = "\033[0m"


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Context extras present on ``record``, in CONTEXT_FIELDS order."""
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}


class JSONFormatter(logging.Formatter):
    """Formatter that outputs one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class RichTextFormatter(logging.Formatter):
    """Formatter that outputs colored text with emoji icons."""

    def format(self, record: logging.LogRecord) -> str:
        color, icon = LEVEL_STYLES.get(record.levelname, (RESET, ""))
        line = (
            f"{icon} {self.formatTime(record, '%Y-%m-%d %H:%M:%S')} "
            f"{record.levelname:<8} {record.name:<16} {record.getMessage()}"
        )
        context = record_context(record)
        if context:
            line += " [" + " ".join(f"{key}={value}" for key, value in context.items()) + "]"
        line = f"{color}{line}{RESET}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


def _level_from_env() -> int:
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), None)
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Return logger ``name`` with a stdout handler attached once.

    Level and format are read from LOG_LEVEL / LOG_TYPE on first configuration;
    unknown levels fall back to INFO.
    """
    logger_instance = logging.getLogger(name)
    if logger_instance.handlers:
        return logger_instance

    level = _level_from_env()
    json_output = os.getenv("LOG_TYPE", "text").lower() == "json"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if json_output else RichTextFormatter())
    logger_instance.setLevel(level)
    logger_instance.addHandler(handler)
    return logger_instance


logger = get_logger("recipe_finder")

for _noisy in ("google.genai", "httpx", "aiohttp.access"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
