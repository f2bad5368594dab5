"""Text-completion service used for classification, extraction and summaries.

The pipeline only depends on the ``TextCompletionService`` protocol:
a prompt template plus variables in, plain text out. Templates are Jinja2
strings (``{{ user_message }}``) rendered in a sandbox with strict
undefined handling, so a missing variable fails loudly and user text is
never evaluated as template code.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol

import anthropic
from anthropic import AsyncAnthropic
from jinja2 import StrictUndefined, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from src.errors import ExternalServiceError, ExternalServiceTimeout
from src.services.external_call import bounded_call

logger = logging.getLogger(__name__)

SERVICE_NAME = "completion"

DEFAULT_MODEL = "claude-sonnet-4-20250514"

_prompt_env = SandboxedEnvironment(undefined=StrictUndefined, autoescape=False)


def render_prompt(template: str, variables: Mapping[str, str] | None = None) -> str:
    """Render a prompt template with the given variables.

    Args:
        template: Jinja2 template text.
        variables: Values for the template's placeholders.

    Returns:
        Rendered prompt text.

    Raises:
        ValueError: If the template is invalid or a variable is missing.
    """
    try:
        return _prompt_env.from_string(template).render(**dict(variables or {}))
    except TemplateError as e:
        raise ValueError(f"Cannot render prompt template: {e}") from e


class TextCompletionService(Protocol):
    """Anything that turns a prompt into text."""

    async def complete(self, prompt: str, variables: Mapping[str, str] | None = None) -> str:
        """Render ``prompt`` with ``variables`` and return the completion text."""
        ...


class AnthropicTextCompletionService:
    """TextCompletionService backed by the Anthropic Messages API.

    Args:
        api_key: Anthropic API key.
        model: Model identifier.
        max_tokens: Completion length cap.
        timeout_seconds: Budget for a single completion.
        client: Optional pre-built client (tests inject fakes here).
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 1024,
        timeout_seconds: float = 30.0,
        client: AsyncAnthropic | None = None,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._timeout_seconds = timeout_seconds
        self._client = client or AsyncAnthropic(api_key=api_key, timeout=timeout_seconds)

    async def complete(self, prompt: str, variables: Mapping[str, str] | None = None) -> str:
        """Render the prompt and return the concatenated text blocks.

        Raises:
            ExternalServiceError: On API, connection or rendering failure.
            ExternalServiceTimeout: If the call exceeds its budget.
        """
        try:
            rendered = render_prompt(prompt, variables)
        except ValueError as e:
            raise ExternalServiceError(SERVICE_NAME, str(e)) from e

        try:
            response = await bounded_call(
                SERVICE_NAME,
                self._client.messages.create(
                    model=self._model,
                    max_tokens=self._max_tokens,
                    messages=[{"role": "user", "content": rendered}],
                ),
                self._timeout_seconds,
            )
        except anthropic.APITimeoutError as e:
            raise ExternalServiceTimeout(SERVICE_NAME, self._timeout_seconds) from e
        except anthropic.APIError as e:
            logger.error("Completion request failed: %s", type(e).__name__)
            raise ExternalServiceError(SERVICE_NAME, f"Completion request failed: {type(e).__name__}") from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        logger.debug("Completion returned %d characters", len(text))
        return text


__all__ = [
    "AnthropicTextCompletionService",
    "TextCompletionService",
    "render_prompt",
]
