"""Input hygiene for text that enters or leaves the wizard."""

import re


class InputSanitizer:
    """Length limits, whitespace trimming and prompt-injection screening.

    Chat messages are sanitized before they reach the conversation engine.
    Free-form project info and model completions have their own limits.
    """

    MAX_MESSAGE_LENGTH = 5000
    MAX_PROJECT_INFO_LENGTH = 5000
    # Larger than the description limit so oversized drafts still fail validation
    MAX_COMPLETION_LENGTH = 20000

    # Phrases that try to override the generator's instructions
    INJECTION_PATTERNS = [
        r"(ignore|disregard|forget)\s+(previous|above|all)\s+(instructions?|prompts?)",
        r"new\s+instructions?:",
        r"^\s*system\s*:",
        r"\[system\]",
        r"<\|im_start\|>",
        r"<\|endoftext\|>",
        r"(игнорируй|забудь)\s+(предыдущие|все)\s+(инструкции|указания)",
    ]
    _injection_re = re.compile(
        "|".join(f"(?:{p})" for p in INJECTION_PATTERNS),
        re.IGNORECASE | re.MULTILINE,
    )

    @classmethod
    def _clean(cls, text: str | None, max_length: int) -> str:
        if not text:
            return ""
        text = text[:max_length].strip()
        # Drop lone surrogates that cannot be encoded
        return text.encode("utf-8", errors="ignore").decode("utf-8")

    @classmethod
    def sanitize_message(cls, message: str | None) -> str:
        """Trim a chat message and cap it at MAX_MESSAGE_LENGTH characters."""
        return cls._clean(message, cls.MAX_MESSAGE_LENGTH)

    @classmethod
    def sanitize_project_info(cls, info: str | None) -> str:
        return cls._clean(info, cls.MAX_PROJECT_INFO_LENGTH)

    @classmethod
    def sanitize_completion(cls, text: str | None) -> str:
        return cls._clean(text, cls.MAX_COMPLETION_LENGTH)

    @classmethod
    def detect_injection_attempt(cls, text: str) -> bool:
        """Return True if the text looks like an attempt to rewrite the model's instructions.

        Args:
            text: Raw user text bound for the generative backend
        """
        return bool(text) and cls._injection_re.search(text) is not None
