"""Single-shot Claude call that turns a prompt and schema into raw text.

The Anthropic client is injected so callers (and tests) decide how it
is built. One request per :meth:`GenerationClient.generate` call; there
is no retry and the raw response is not kept.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from bbq_planner.claude_utils import make_anthropic_client

if TYPE_CHECKING:
    from bbq_planner.config import Config

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 4096

_SYSTEM_TEMPLATE = (
    "You produce BBQ shopping lists as data. Respond with JSON only: no "
    "markdown fences, no explanation before or after. The JSON must "
    "conform exactly to this JSON Schema:\n{schema}"
)


class ServiceError(Exception):
    """Raised when the generation service fails or returns nothing."""


class GenerationClient:
    """Sends one shopping list request to Claude and returns its text.

    Args:
        anthropic_client: Anthropic SDK client, or None when no API key
            is configured.
        model: Claude model identifier.
        max_tokens: Response token limit.
    """

    def __init__(
        self,
        anthropic_client: Any = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        """Initialize the client wrapper.

        Args:
            anthropic_client: Anthropic SDK client or None.
            model: Claude model identifier.
            max_tokens: Response token limit.
        """
        self._client = anthropic_client
        self._model = model
        self._max_tokens = max_tokens

    @property
    def model(self) -> str:
        """Claude model identifier used for requests."""
        return self._model

    def generate(self, prompt_text: str, output_schema: dict[str, Any]) -> str:
        """Ask Claude for a shopping list matching the output schema.

        Args:
            prompt_text: Instruction text from the prompt builder.
            output_schema: JSON schema the answer must follow.

        Returns:
            Response text with surrounding whitespace removed.

        Raises:
            ServiceError: If no client is configured, the call fails, or
                the response body is empty.
        """
        if self._client is None:
            raise ServiceError("Anthropic client is not configured")

        system = _SYSTEM_TEMPLATE.format(
            schema=json.dumps(output_schema, ensure_ascii=False, indent=2)
        )
        try:
            response = self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                system=system,
                messages=[{"role": "user", "content": prompt_text}],
            )
        except Exception as err:
            logger.exception("Claude API call failed")
            raise ServiceError("Claude API call failed") from err

        text = _response_text(response).strip()
        if not text:
            logger.warning("Claude returned an empty response")
            raise ServiceError("Claude returned an empty response")
        return text


def _response_text(response: Any) -> str:
    """Concatenate the text blocks of a Messages API response.

    Args:
        response: Messages API response object.

    Returns:
        Joined text, or an empty string when there is none.
    """
    blocks = getattr(response, "content", None) or []
    parts: list[str] = []
    for block in blocks:
        text = getattr(block, "text", None)
        if isinstance(text, str):
            parts.append(text)
    return "".join(parts)


def make_generation_client(config: Config) -> GenerationClient:
    """Build the generation client described by the configuration.

    Args:
        config: Application configuration.

    Returns:
        GenerationClient. Without an API key it has no Anthropic client
        and every generate call raises ServiceError.
    """
    return GenerationClient(
        anthropic_client=make_anthropic_client(config.anthropic_api_key),
        model=config.model,
        max_tokens=config.max_tokens,
    )
