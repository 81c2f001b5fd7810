"""Logging configuration for the link shortener.

``setup_logging`` is called once at startup; the logger it returns is passed
to every component that logs instead of being looked up globally.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional


LOGGER_NAME = "link_shortener"


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras."""
    
    STANDARD_ATTRS = frozenset(
        {
            'args',
            'asctime',
            'created',
            'exc_info',
            'exc_text',
            'filename',
            'funcName',
            'levelname',
            'levelno',
            'lineno',
            'module',
            'msecs',
            'message',
            'msg',
            'name',
            'pathname',
            'process',
            'processName',
            'relativeCreated',
            'stack_info',
            'thread',
            'threadName',
            'taskName',
        }
    )
    
    def format(self, record: logging.LogRecord) -> str:
        timestamp = (
            datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )
        
        log = {
            "timestamp": timestamp,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        
        # Attach `extra` fields
        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS:
                log[key] = value
        
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        
        return json.dumps(log, default=str)


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JsonFormatter()
    if log_format == "pretty":
        return logging.Formatter(
            "%(asctime)s  %(levelname)s %(name)s\n"
            "    %(message)s\n"
            "    at %(pathname)s:%(lineno)d",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    return logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def setup_logging(
    level: str = "INFO",
    log_format: str = "full",
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Setup logging configuration.
    
    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: One of ``full``, ``pretty`` or ``json``
        log_file: Optional log file path
        
    Returns:
        Configured logger
    """
    # Convert level string to logging constant
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    
    # Remove existing handlers
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    
    formatter = _build_formatter(getattr(log_format, "value", log_format))
    
    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    
    # File handler (if specified)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    
    return logger
