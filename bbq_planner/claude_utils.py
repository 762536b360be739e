"""Shared helpers for talking to Claude.

Anthropic client creation and cleanup of the text Claude sends back
before it is handed to the JSON parser.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def extract_json_text(raw: str) -> str:
    """Extract JSON from a Claude response, stripping markdown fences.

    Args:
        raw: Raw text from Claude's response.

    Returns:
        Cleaned string ready for JSON parsing.
    """
    text = raw.strip()
    if text.startswith("```"):
        first_newline = text.find("\n")
        text = text[first_newline + 1 :] if first_newline != -1 else text[3:]
    if text.endswith("```"):
        text = text[: -len("```")]
    return text.strip()


def make_anthropic_client(api_key: str) -> object | None:
    """Create an Anthropic client from the given API key.

    Args:
        api_key: Anthropic API key string. Empty means not configured.

    Returns:
        Anthropic client instance, or None when no key is set or the
        SDK cannot be loaded.
    """
    if not api_key:
        logger.warning("ANTHROPIC_API_KEY is not set; list generation disabled")
        return None
    try:
        import anthropic

        return anthropic.Anthropic(api_key=api_key)
    except Exception:
        logger.warning("Anthropic client unavailable; list generation disabled")
        return None
