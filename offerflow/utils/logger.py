"""
Logging configuration and utilities for the OfferFlow interview preparation assistant.

This module provides structured logging with file rotation and per-component
loggers that carry interview context (company, role, session) on every record.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime
import json

from ..config import get_config

class StructuredFormatter(logging.Formatter):
    """Custom formatter that outputs structured logs with context."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with structured information."""
        # Create base log entry
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add exception info if present
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        return json.dumps(log_entry, default=str)

class ColoredConsoleFormatter(logging.Formatter):
    """Colored console formatter for better readability."""

    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        """Format with colors for console output."""
        color = self.COLORS.get(record.levelname, '')
        reset = self.RESET

        timestamp = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')

        formatted = f"{color}[{timestamp}] {record.levelname:8} {record.name:20} | {record.getMessage()}{reset}"

        if record.exc_info:
            formatted += f"\n{self.formatException(record.exc_info)}"

        return formatted

class PrepLogger:
    """Logger that attaches interview prep context to every message."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.context: Dict[str, Any] = {}

    def set_context(self, **kwargs) -> None:
        """Set context fields that will be included in all log messages."""
        self.context.update(kwargs)

    def clear_context(self, *keys: str) -> None:
        """Clear the given context fields, or all of them when none are named."""
        if not keys:
            self.context.clear()
            return
        for key in keys:
            self.context.pop(key, None)

    def _log_with_context(self, level: int, message: str, exc_info: bool = False, **kwargs) -> None:
        """Log message with context fields."""
        extra_fields = {**self.context, **kwargs}
        extra = {"extra_fields": extra_fields} if extra_fields else {}
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with context."""
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with context."""
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with context."""
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message with context."""
        self._log_with_context(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log error message with the active exception's traceback."""
        self._log_with_context(logging.ERROR, message, exc_info=True, **kwargs)

    def critical(self, message: str, **kwargs) -> None:
        """Log critical message with context."""
        self._log_with_context(logging.CRITICAL, message, **kwargs)

    def session_started(self, session_id: str, company: str, role: str, paid: bool) -> None:
        """Log mock interview session start."""
        self.set_context(session_id=session_id)
        kind = "paid" if paid else "free"
        self.info(f"Started {kind} mock interview for {role} at {company}")

    def session_ended(self, turns: int) -> None:
        """Log mock interview session teardown."""
        self.info(f"Ended mock interview after {turns} transcript entries")
        self.clear_context("session_id")

def setup_logging(config: Optional[Any] = None) -> None:
    """Setup logging configuration for the application."""
    if config is None:
        config = get_config()

    # Create logs directory
    log_dir = Path(config.data_dir) / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))

    # Clear existing handlers
    root_logger.handlers.clear()

    # Console handler with colored output
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    # File handler with rotation if enabled
    if config.log_to_file:
        # Main application log
        app_log_file = log_dir / "app.log"
        file_handler = logging.handlers.RotatingFileHandler(
            app_log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(getattr(logging, config.log_level.upper(), logging.INFO))
        file_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(file_handler)

        # Error log (errors and above only)
        error_log_file = log_dir / "errors.log"
        error_handler = logging.handlers.RotatingFileHandler(
            error_log_file,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(StructuredFormatter())
        root_logger.addHandler(error_handler)

    # Set specific logger levels
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)

    logging.info("Logging system initialized")

def get_logger(name: str) -> PrepLogger:
    """Get a logger instance with interview prep context support."""
    return PrepLogger(name)

# Component-specific loggers
def get_ai_logger() -> PrepLogger:
    """Get logger for AI gateway components."""
    return get_logger("ai_processing")

def get_question_bank_logger() -> PrepLogger:
    """Get logger for the question bank engine."""
    return get_logger("question_bank")

def get_session_logger() -> PrepLogger:
    """Get logger for mock interview sessions."""
    return get_logger("mock_session")

def get_store_logger() -> PrepLogger:
    """Get logger for persistence components."""
    return get_logger("context_store")

def get_ui_logger() -> PrepLogger:
    """Get logger for UI components."""
    return get_logger("ui")
