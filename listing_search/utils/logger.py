"""
Nearby Listing Search Logger Module
-------------------------------------------

This module configures a rotating, JSON-formatted logger for the
"listing_search" application. Each process produces its own
timestamped log file, and log records are written as one-line JSON entries
with the following core fields:

  - timestamp: ISO-formatted datetime string when the event occurred
  - level:     logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
  - logger:    the name of the logger that emitted the record
  - message:   the formatted log message

Any extra attributes you attach to log calls (via the `extra=` argument)
are automatically included in the JSON payload under their own keys.

Classes:
    JsonFormatter: Custom formatter that introspects a LogRecord and serializes
                   its data to JSON, omitting the standard logging attributes
                   listed in its `builtins` ignore set.

Globals:
    logger (logging.Logger): Package logger set to DEBUG and using a
                             RotatingFileHandler.
    handler (RotatingFileHandler): Handler that writes up to 10 MB per file,
                                   keeps 5 backups, and rotates old logs.
    log_filename (Path): Timestamped filename for the current run's log file.

Usage:
    from listing_search.utils.logger import logger

    logger.info("Spatial query complete", extra={"operation": "filter_pipeline", "candidates": 12})
    logger.warning("Route lookup failed", extra={"operation": "road_distance", "reason": "http_error"})

    to produce clean, structured JSON logs that `listing-search-logs` can pretty print.
"""



import json
import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path
from typing import Optional

from ..config import LOGS_DIR

class JsonFormatter(logging.Formatter):
    def format(self, record):
        builtins = {
            "name", "msg", "args", "levelname", "levelno",
            "pathname", "filename", "module", "exc_info",
            "exc_text", "stack_info", "lineno", "funcName",
            "created", "msecs", "relativeCreated", "thread",
            "threadName", "processName", "process", "taskName"
        }
        payload = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level":     record.levelname,
            "logger":    record.name,
            "message":   record.getMessage(),
        }
        # Pick up any extra attributes
        for key, value in record.__dict__.items():
            if key not in builtins:
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        # inf distances and arbitrary payloads must not break a log line
        return json.dumps(payload, default=str)

# ----------------------------------------------------------------------------------------------------------

# Timestamped filename
ts = datetime.now().strftime("%Y%m%d_%H%M%S")
LOGS_DIR.mkdir(parents=True, exist_ok=True)
log_filename = LOGS_DIR / f"listing_search_{ts}.log"

# ----------------------------------------------------------------------------------------------------------

# Create package-level logger
logger = logging.getLogger("listing_search")
logger.setLevel(logging.DEBUG)

handler = RotatingFileHandler(
    filename=log_filename,
    maxBytes=10_000_000,
    backupCount=5
)
handler.setFormatter(JsonFormatter())
logger.addHandler(handler)

# ----------------------------------------------------------------------------------------------------------

def setup_logger(
    name: str,
    level: int = logging.INFO,
    log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Set up a logger with a console handler and a JSON file handler.

    Loggers named under "listing_search." also propagate to the package logger,
    so only the console handler and the optional dedicated file are added here.

    Args:
        name: Name of the logger
        level: Logging level (default: INFO)
        log_file: Optional path to a dedicated JSON log file

    Returns:
        Configured logger instance
    """
    named_logger = logging.getLogger(name)
    named_logger.setLevel(level)

    # Re-running the CLI in one process must not stack handlers
    if getattr(named_logger, "_listing_search_configured", False):
        return named_logger

    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(console_formatter)
    named_logger.addHandler(console_handler)

    # File handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JsonFormatter())
        named_logger.addHandler(file_handler)

    named_logger._listing_search_configured = True
    return named_logger

# ----------------------------------------------------------------------------------------------------------
