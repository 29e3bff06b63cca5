"""
Configuration management for the OfferFlow interview preparation assistant.

This module handles loading environment variables, interview-prep economy
settings and media device options, with secure API key management.
"""

import os
from typing import Dict, Any, Optional, List
from pathlib import Path
from dotenv import load_dotenv
import logging
from dataclasses import dataclass, asdict

logger = logging.getLogger(__name__)

@dataclass
class LLMConfig:
    """Configuration for LLM backends."""
    openrouter_api_key: Optional[str] = None
    use_local_llm: bool = False
    local_llm_model: str = "qwen2.5:32b"
    ollama_base_url: str = "http://localhost:11434"
    default_model: str = "google/gemini-2.5-flash"
    temperature: float = 0.7
    max_tokens: int = 4000
    request_timeout: float = 60.0

@dataclass
class PrepConfig:
    """Interview preparation economy and generation settings."""
    max_free_mock_attempts: int = 2
    mock_session_cost: int = 200
    initial_points: int = 0
    resume_context_max_chars: int = 3000

@dataclass
class MediaConfig:
    """Camera and microphone settings for mock interview sessions."""
    camera_index: int = 0
    audio_sample_rate: int = 16000
    audio_channels: int = 1
    audio_frames_per_buffer: int = 1024

@dataclass
class AppConfig:
    """Main application configuration."""
    log_level: str = "INFO"
    log_to_file: bool = True
    data_dir: str = "data"
    database_path: str = "data/offerflow.db"

    # Component configurations
    llm: LLMConfig = None
    prep: PrepConfig = None
    media: MediaConfig = None

    def __post_init__(self):
        if self.llm is None:
            self.llm = LLMConfig()
        if self.prep is None:
            self.prep = PrepConfig()
        if self.media is None:
            self.media = MediaConfig()

def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back on bad input."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer value for {name}: {raw!r}")
        return default

def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric value for {name}: {raw!r}")
        return default

class ConfigManager:
    """Manages application configuration from environment variables and settings."""

    def __init__(self, env_file: Optional[str] = None):
        """Initialize configuration manager."""
        self.env_file = env_file or ".env"
        self.config = AppConfig()
        self.load_config()

    def load_config(self) -> None:
        """Load configuration from environment variables."""
        # Load .env file if it exists
        if Path(self.env_file).exists():
            load_dotenv(self.env_file)
            logger.info(f"Loaded environment from {self.env_file}")

        # LLM Configuration
        self.config.llm.openrouter_api_key = os.getenv("OPENROUTER_API_KEY")
        self.config.llm.use_local_llm = os.getenv("USE_LOCAL_LLM", "false").lower() == "true"
        self.config.llm.local_llm_model = os.getenv("LOCAL_LLM_MODEL", "qwen2.5:32b")
        self.config.llm.ollama_base_url = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
        self.config.llm.default_model = os.getenv("DEFAULT_LLM_MODEL", "google/gemini-2.5-flash")
        self.config.llm.temperature = _env_float("LLM_TEMPERATURE", 0.7)
        self.config.llm.request_timeout = _env_float("LLM_REQUEST_TIMEOUT", 60.0)

        # Interview prep economy
        self.config.prep.max_free_mock_attempts = _env_int("MAX_FREE_MOCK_ATTEMPTS", 2)
        self.config.prep.mock_session_cost = _env_int("MOCK_SESSION_COST", 200)
        self.config.prep.initial_points = _env_int("INITIAL_POINTS", 0)
        self.config.prep.resume_context_max_chars = _env_int("RESUME_CONTEXT_MAX_CHARS", 3000)

        # Media devices
        self.config.media.camera_index = _env_int("CAMERA_INDEX", 0)
        self.config.media.audio_sample_rate = _env_int("AUDIO_SAMPLE_RATE", 16000)
        self.config.media.audio_channels = _env_int("AUDIO_CHANNELS", 1)

        # App Configuration
        self.config.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.config.log_to_file = os.getenv("LOG_TO_FILE", "true").lower() == "true"
        self.config.data_dir = os.getenv("DATA_DIR", "data")
        self.config.database_path = os.getenv(
            "DATABASE_PATH", str(Path(self.config.data_dir) / "offerflow.db")
        )

        # Ensure directories exist
        self._ensure_directories()

        logger.info("Configuration loaded successfully")

    def _ensure_directories(self) -> None:
        """Ensure required directories exist."""
        directories = [
            self.config.data_dir,
            f"{self.config.data_dir}/logs"
        ]

        for directory in directories:
            Path(directory).mkdir(parents=True, exist_ok=True)

    def get_llm_config(self) -> LLMConfig:
        """Get LLM configuration."""
        return self.config.llm

    def get_prep_config(self) -> PrepConfig:
        """Get interview prep configuration."""
        return self.config.prep

    def get_media_config(self) -> MediaConfig:
        """Get media device configuration."""
        return self.config.media

    def get_app_config(self) -> AppConfig:
        """Get full application configuration."""
        return self.config

    def validate_config(self) -> Dict[str, List[str]]:
        """Validate configuration and return any issues."""
        issues = {
            "errors": [],
            "warnings": []
        }

        # Check LLM configuration
        if not self.config.llm.openrouter_api_key and not self.config.llm.use_local_llm:
            issues["errors"].append("No LLM backend configured. Set OPENROUTER_API_KEY or USE_LOCAL_LLM=true")

        prep = self.config.prep
        if prep.max_free_mock_attempts < 0:
            issues["errors"].append("MAX_FREE_MOCK_ATTEMPTS must not be negative")
        if prep.mock_session_cost < 0:
            issues["errors"].append("MOCK_SESSION_COST must not be negative")
        if prep.initial_points < 0:
            issues["errors"].append("INITIAL_POINTS must not be negative")

        if prep.max_free_mock_attempts == 0:
            issues["warnings"].append("Free mock interviews disabled - every session requires points")

        if self.config.llm.request_timeout <= 0:
            issues["warnings"].append("LLM_REQUEST_TIMEOUT is not positive - requests may hang")

        return issues

    def mask_sensitive_config(self) -> Dict[str, Any]:
        """Get configuration with sensitive values masked for display."""
        config_dict = asdict(self.config)

        # Mask API keys
        sensitive_keys = ["openrouter_api_key"]

        def mask_value(obj):
            if isinstance(obj, dict):
                for key, value in obj.items():
                    if key in sensitive_keys and value:
                        obj[key] = f"{value[:8]}..." if len(value) > 8 else "***"
                    elif isinstance(value, dict):
                        mask_value(value)
            return obj

        return mask_value(config_dict)

# Global configuration instance
config_manager = ConfigManager()

def get_config() -> AppConfig:
    """Get the global configuration instance."""
    return config_manager.get_app_config()

def get_llm_config() -> LLMConfig:
    """Get LLM configuration."""
    return config_manager.get_llm_config()

def get_prep_config() -> PrepConfig:
    """Get interview prep configuration."""
    return config_manager.get_prep_config()

def get_media_config() -> MediaConfig:
    """Get media device configuration."""
    return config_manager.get_media_config()

def validate_config() -> Dict[str, List[str]]:
    """Validate current configuration."""
    return config_manager.validate_config()
