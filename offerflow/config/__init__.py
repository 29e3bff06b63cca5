"""
Configuration module for the OfferFlow interview preparation assistant.

This module provides database management and application configuration.
"""

from .database import DatabaseManager
from .settings import (
    ConfigManager,
    AppConfig,
    LLMConfig,
    PrepConfig,
    MediaConfig,
    get_config,
    get_llm_config,
    get_prep_config,
    get_media_config,
    validate_config,
    config_manager
)

__all__ = [
    'DatabaseManager',
    'ConfigManager',
    'AppConfig',
    'LLMConfig',
    'PrepConfig',
    'MediaConfig',
    'get_config',
    'get_llm_config',
    'get_prep_config',
    'get_media_config',
    'validate_config',
    'config_manager'
]
