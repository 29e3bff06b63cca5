"""
Utility modules for the OfferFlow interview preparation assistant.

This package provides logging utilities.
"""

from .logger import (
    setup_logging,
    get_logger,
    get_ai_logger,
    get_question_bank_logger,
    get_session_logger,
    get_store_logger,
    get_ui_logger,
    PrepLogger,
    StructuredFormatter,
    ColoredConsoleFormatter
)

__all__ = [
    'setup_logging',
    'get_logger',
    'get_ai_logger',
    'get_question_bank_logger',
    'get_session_logger',
    'get_store_logger',
    'get_ui_logger',
    'PrepLogger',
    'StructuredFormatter',
    'ColoredConsoleFormatter'
]
