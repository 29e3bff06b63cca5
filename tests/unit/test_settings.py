"""Unit tests for environment-driven configuration."""

import pytest

from offerflow.config.settings import ConfigManager


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ("MAX_FREE_MOCK_ATTEMPTS", "MOCK_SESSION_COST", "INITIAL_POINTS",
                 "OPENROUTER_API_KEY", "USE_LOCAL_LLM", "DATABASE_PATH", "CAMERA_INDEX"):
        # setenv first so values a dotenv file loads are also undone
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    return tmp_path


@pytest.mark.unit
def test_defaults(clean_env):
    """Test the economy defaults without any overrides."""
    manager = ConfigManager(env_file=str(clean_env / "missing.env"))
    prep = manager.get_prep_config()

    assert prep.max_free_mock_attempts == 2
    assert prep.mock_session_cost == 200
    assert prep.initial_points == 0
    assert manager.get_app_config().database_path.endswith("offerflow.db")
    assert (clean_env / "data" / "logs").is_dir()


@pytest.mark.unit
def test_environment_overrides(clean_env, monkeypatch):
    """Test numeric overrides are read from the environment."""
    monkeypatch.setenv("MAX_FREE_MOCK_ATTEMPTS", "5")
    monkeypatch.setenv("MOCK_SESSION_COST", "150")
    monkeypatch.setenv("USE_LOCAL_LLM", "TRUE")

    manager = ConfigManager(env_file=str(clean_env / "missing.env"))

    assert manager.get_prep_config().max_free_mock_attempts == 5
    assert manager.get_prep_config().mock_session_cost == 150
    assert manager.get_llm_config().use_local_llm is True


@pytest.mark.unit
def test_bad_numbers_fall_back(clean_env, monkeypatch):
    """Test non-numeric values keep the defaults."""
    monkeypatch.setenv("MOCK_SESSION_COST", "two hundred")

    manager = ConfigManager(env_file=str(clean_env / "missing.env"))
    assert manager.get_prep_config().mock_session_cost == 200


@pytest.mark.unit
def test_env_file_loaded(clean_env):
    """Test values from a dotenv file are picked up."""
    env_file = clean_env / ".env"
    env_file.write_text("INITIAL_POINTS=400\n")

    manager = ConfigManager(env_file=str(env_file))
    assert manager.get_prep_config().initial_points == 400


@pytest.mark.unit
def test_api_key_masked(clean_env, monkeypatch):
    """Test secrets never appear in the masked config."""
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-or-secret-value")

    manager = ConfigManager(env_file=str(clean_env / "missing.env"))
    masked = manager.mask_sensitive_config()

    assert "sk-or-secret-value" not in str(masked)
