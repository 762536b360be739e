"""Tests for bbq_planner.config module."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

if TYPE_CHECKING:
    from pathlib import Path

from bbq_planner.config import Config, ConfigError, load_config
from bbq_planner.generation_client import DEFAULT_MAX_TOKENS, DEFAULT_MODEL


class TestConfig:
    """Tests for the Config dataclass."""

    def test_config_defaults(self) -> None:
        """Test Config uses correct default values."""
        cfg = Config()
        assert cfg.anthropic_api_key == ""
        assert cfg.model == DEFAULT_MODEL
        assert cfg.max_tokens == DEFAULT_MAX_TOKENS
        assert cfg.flask_port == 5000
        assert cfg.flask_debug is False

    def test_config_is_frozen(self) -> None:
        """Test Config is immutable (frozen dataclass)."""
        cfg = Config(anthropic_api_key="sk-test")
        with pytest.raises(AttributeError):
            cfg.anthropic_api_key = "other"  # type: ignore[misc]

    def test_has_api_key(self) -> None:
        """Test has_api_key reflects whether a key is set."""
        assert Config(anthropic_api_key="sk-test").has_api_key is True
        assert Config().has_api_key is False


class TestConfigError:
    """Tests for ConfigError exception."""

    def test_config_error_is_exception(self) -> None:
        """Test ConfigError is a proper exception."""
        err = ConfigError("bad value")
        assert str(err) == "bad value"
        assert isinstance(err, Exception)


class TestLoadConfig:
    """Tests for load_config function."""

    @patch("bbq_planner.config.load_dotenv")
    @patch.dict(os.environ, {"ANTHROPIC_API_KEY": "sk-test-key"}, clear=True)
    def test_load_config_minimal(self, _mock_dotenv: object) -> None:
        """Test load_config with only the API key set."""
        cfg = load_config()
        assert cfg.anthropic_api_key == "sk-test-key"
        assert cfg.model == DEFAULT_MODEL
        assert cfg.flask_port == 5000

    @patch("bbq_planner.config.load_dotenv")
    @patch.dict(os.environ, {}, clear=True)
    def test_missing_api_key_is_a_warning(
        self, _mock_dotenv: object, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a missing API key logs a warning instead of raising."""
        with caplog.at_level(logging.WARNING, logger="bbq_planner.config"):
            cfg = load_config()
        assert cfg.anthropic_api_key == ""
        assert cfg.has_api_key is False
        assert "ANTHROPIC_API_KEY is not set" in caplog.text

    @patch("bbq_planner.config.load_dotenv")
    @patch.dict(
        os.environ,
        {"ANTHROPIC_API_KEY": "sk-test", "FLASK_PORT": "not_a_number"},
        clear=True,
    )
    def test_invalid_flask_port_raises(self, _mock_dotenv: object) -> None:
        """Test load_config raises ConfigError for non-integer FLASK_PORT."""
        with pytest.raises(ConfigError, match="FLASK_PORT must be an integer"):
            load_config()

    @patch("bbq_planner.config.load_dotenv")
    @patch.dict(
        os.environ,
        {"ANTHROPIC_API_KEY": "sk-test", "BBQ_PLANNER_MAX_TOKENS": "lots"},
        clear=True,
    )
    def test_invalid_max_tokens_raises(self, _mock_dotenv: object) -> None:
        """Test load_config raises ConfigError for non-integer max tokens."""
        with pytest.raises(ConfigError, match="BBQ_PLANNER_MAX_TOKENS"):
            load_config()

    @patch("bbq_planner.config.load_dotenv")
    @patch.dict(
        os.environ,
        {"ANTHROPIC_API_KEY": "sk-test", "BBQ_PLANNER_MAX_TOKENS": "0"},
        clear=True,
    )
    def test_non_positive_max_tokens_raises(self, _mock_dotenv: object) -> None:
        """Test load_config rejects a zero token limit."""
        with pytest.raises(ConfigError, match="must be positive"):
            load_config()

    @patch("bbq_planner.config.load_dotenv")
    @patch.dict(
        os.environ,
        {
            "ANTHROPIC_API_KEY": "sk-full",
            "BBQ_PLANNER_MODEL": "claude-test-model",
            "BBQ_PLANNER_MAX_TOKENS": "2048",
            "FLASK_PORT": "9090",
            "FLASK_DEBUG": "true",
        },
        clear=True,
    )
    def test_load_config_all_env_vars(self, _mock_dotenv: object) -> None:
        """Test load_config reads all environment variables correctly."""
        cfg = load_config()
        assert cfg.anthropic_api_key == "sk-full"
        assert cfg.model == "claude-test-model"
        assert cfg.max_tokens == 2048
        assert cfg.flask_port == 9090
        assert cfg.flask_debug is True

    @patch("bbq_planner.config.load_dotenv")
    @patch.dict(
        os.environ,
        {"ANTHROPIC_API_KEY": "sk-test", "FLASK_DEBUG": "FALSE"},
        clear=True,
    )
    def test_flask_debug_case_insensitive(self, _mock_dotenv: object) -> None:
        """Test FLASK_DEBUG comparison is case-insensitive."""
        cfg = load_config()
        assert cfg.flask_debug is False

    @patch("bbq_planner.config.load_dotenv")
    @patch.dict(
        os.environ,
        {"ANTHROPIC_API_KEY": "sk-test", "FLASK_DEBUG": "1"},
        clear=True,
    )
    def test_flask_debug_truthy_1(self, _mock_dotenv: object) -> None:
        """Test FLASK_DEBUG=1 is treated as True."""
        cfg = load_config()
        assert cfg.flask_debug is True

    def test_load_config_from_env_file(self, tmp_path: Path) -> None:
        """Test load_config reads from a .env file."""
        env_file = tmp_path / ".env"
        env_file.write_text("ANTHROPIC_API_KEY=sk-from-file\n")
        with patch.dict(os.environ, {}, clear=True):
            cfg = load_config(env_path=env_file)
        assert cfg.anthropic_api_key == "sk-from-file"
