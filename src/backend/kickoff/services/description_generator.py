"""Project description drafting through the generative-text backend."""

import logging
from typing import Any

import anthropic

from kickoff.config import settings
from kickoff.security import InputSanitizer

logger = logging.getLogger(__name__)

DESCRIPTION_MODEL_MAP = {
    "haiku": "claude-3-5-haiku-20241022",
    "sonnet": "claude-sonnet-4-20250514",
    "opus": "claude-opus-4-20250514",
}

SUGGESTION_SYSTEM_PROMPT = (
    "You are a specialist in writing project descriptions. Your task is to write "
    "a clear, well-structured project description based on the short information "
    "provided by the user."
)

DRAFT_SYSTEM_PROMPT = """You are an experienced project manager who writes project documentation.
Your task is to produce a clear, structured and professional project description.

The description must cover:
- Project goals and objectives
- Expected results
- Main implementation stages
- Technologies or methodologies used

Format:
- Use a business style
- Split the text into logical paragraphs
- Use bulleted lists where appropriate"""


class GenerationError(Exception):
    """The generative backend failed or returned nothing usable."""


def _get_anthropic_client() -> anthropic.Anthropic:
    """Get an Anthropic client using centralized configuration.

    Uses settings.anthropic_api_key if configured, otherwise falls back
    to the ANTHROPIC_API_KEY environment variable. SDK retries are disabled.
    """
    options: dict[str, Any] = {
        "max_retries": 0,
        "timeout": settings.description_timeout_seconds,
    }
    if settings.anthropic_api_key:
        options["api_key"] = settings.anthropic_api_key
    return anthropic.Anthropic(**options)


class AnthropicCompletionBackend:
    """Turns an ordered list of role-tagged messages into one completion."""

    def __init__(self, model: str | None = None, client: anthropic.Anthropic | None = None):
        self.model = model or settings.description_model
        self._client = client

    def complete(self, messages: list[dict[str, str]]) -> str:
        """Send the messages and return the completion text.

        System-role messages are passed as the system prompt.

        Raises:
            GenerationError: On API failure or an empty completion
        """
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        conversation = [
            {"role": m["role"], "content": m["content"]}
            for m in messages
            if m["role"] != "system"
        ]
        if not conversation:
            raise GenerationError("No user message to complete")

        request: dict[str, Any] = {
            "model": DESCRIPTION_MODEL_MAP.get(self.model, self.model),
            "max_tokens": settings.description_max_tokens,
            "messages": conversation,
        }
        if system:
            request["system"] = system

        try:
            if not self._client:
                self._client = _get_anthropic_client()
            response = self._client.messages.create(**request)
        except anthropic.AuthenticationError as e:
            logger.error(f"Anthropic authentication failed: {e}")
            raise GenerationError("Generative backend is not configured") from e
        except anthropic.AnthropicError as e:
            logger.warning(f"Anthropic API error during generation: {e}")
            raise GenerationError(f"Generative backend request failed: {e}") from e

        text = "".join(
            getattr(block, "text", "")
            for block in (response.content or [])
            if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            raise GenerationError("Empty response from generative backend")
        return text


class DescriptionGenerator:
    """Drafts project descriptions from short user input."""

    def __init__(self, backend: AnthropicCompletionBackend | None = None):
        self.backend = backend or AnthropicCompletionBackend()

    def suggest(self, raw_info: str) -> str:
        """Draft a candidate description for the wizard's side path."""
        messages = [
            {"role": "system", "content": SUGGESTION_SYSTEM_PROMPT},
            {
                "role": "user",
                "content": (
                    "Write a detailed project description based on this "
                    f"information: {raw_info}"
                ),
            },
        ]
        return self._generate(messages)

    def draft(self, project_info: str) -> str:
        """Draft a long-form description for the standalone endpoint."""
        messages = [
            {"role": "system", "content": DRAFT_SYSTEM_PROMPT},
            {"role": "user", "content": project_info},
        ]
        return self._generate(messages)

    def _generate(self, messages: list[dict[str, str]]) -> str:
        logger.info(f"Requesting description from model {self.backend.model}")
        text = InputSanitizer.sanitize_completion(self.backend.complete(messages))
        if not text:
            raise GenerationError("Empty response from generative backend")
        return text
