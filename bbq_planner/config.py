"""Configuration loading and validation for BBQ Planner.

Loads settings from .env via python-dotenv. A missing API key is only
a warning here; generation fails later with a ServiceError. Malformed
numeric settings fail fast with a ConfigError.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from bbq_planner.generation_client import DEFAULT_MAX_TOKENS, DEFAULT_MODEL

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration is invalid."""


@dataclass(frozen=True)
class Config:
    """Typed, validated application configuration."""

    # Needed for Claude API calls; empty disables generation
    anthropic_api_key: str = ""

    # Claude request settings
    model: str = DEFAULT_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS

    # Flask
    flask_port: int = 5000
    flask_debug: bool = False

    @property
    def has_api_key(self) -> bool:
        """Whether an Anthropic API key is configured."""
        return bool(self.anthropic_api_key)


def _int_setting(name: str, default: int) -> int:
    """Read an integer environment variable.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset.

    Returns:
        Parsed integer.

    Raises:
        ConfigError: If the value is not an integer.
    """
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError as err:
        raise ConfigError(f"{name} must be an integer, got: {raw!r}") from err


def load_config(env_path: str | Path | None = None) -> Config:
    """Load and validate configuration from environment / .env file.

    Args:
        env_path: Optional path to .env file. If None, searches from cwd upward.

    Returns:
        Validated Config instance.

    Raises:
        ConfigError: If a numeric setting is malformed.
    """
    load_dotenv(dotenv_path=env_path)

    anthropic_api_key = os.getenv("ANTHROPIC_API_KEY", "")
    if not anthropic_api_key:
        logger.warning(
            "ANTHROPIC_API_KEY is not set. "
            "Copy .env.example to .env and fill in your key to generate lists."
        )

    max_tokens = _int_setting("BBQ_PLANNER_MAX_TOKENS", DEFAULT_MAX_TOKENS)
    if max_tokens <= 0:
        raise ConfigError(
            f"BBQ_PLANNER_MAX_TOKENS must be positive, got: {max_tokens}"
        )

    return Config(
        anthropic_api_key=anthropic_api_key,
        model=os.getenv("BBQ_PLANNER_MODEL", DEFAULT_MODEL) or DEFAULT_MODEL,
        max_tokens=max_tokens,
        flask_port=_int_setting("FLASK_PORT", 5000),
        flask_debug=os.getenv("FLASK_DEBUG", "false").lower() in ("true", "1", "yes"),
    )
