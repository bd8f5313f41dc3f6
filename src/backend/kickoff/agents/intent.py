"""Keyword and pattern heuristics for classifying wizard messages."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum

from kickoff.models.conversation import WizardStep
from kickoff.models.project import Priority

DATE_PATTERN = re.compile(r"(\d{2})[-./](\d{2})[-./](\d{4})")
EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

# English words match whole words only ("how" must not fire on "show")
HELP_WORDS = (
    "help",
    "suggest",
    "generate",
    "come up with",
    "advise",
    "how",
    "what",
    "why",
    "when",
)
HELP_PATTERN = re.compile(r"\b(?:" + "|".join(map(re.escape, HELP_WORDS)) + r")\b")

# Russian stems match anywhere
HELP_STEMS = (
    "помоги",
    "придумай",
    "сгенерируй",
    "посоветуй",
    "предложи",
    "как",
    "что",
    "зачем",
    "почему",
    "когда",
)

DESCRIPTION_STEMS = ("description", "describe", "описани")
NAME_STEMS = ("name", "title", "назван")

# Checked in order, first match wins. Negated stems come before the stems
# they contain ("not urgent" before "urgent").
PRIORITY_KEYWORDS: list[tuple[str, Priority]] = [
    ("not urgent", Priority.LOW),
    ("not important", Priority.LOW),
    ("несрочн", Priority.LOW),
    ("неважн", Priority.LOW),
    ("urgent", Priority.HIGH),
    ("critical", Priority.HIGH),
    ("important", Priority.HIGH),
    ("asap", Priority.HIGH),
    ("срочн", Priority.HIGH),
    ("критичн", Priority.HIGH),
    ("важн", Priority.HIGH),
    ("normal", Priority.MEDIUM),
    ("medium", Priority.MEDIUM),
    ("regular", Priority.MEDIUM),
    ("средн", Priority.MEDIUM),
    ("нормальн", Priority.MEDIUM),
    ("обычн", Priority.MEDIUM),
    ("low", Priority.LOW),
    ("later", Priority.LOW),
    ("низк", Priority.LOW),
    ("потом", Priority.LOW),
]

GOAL_KEYWORDS = ("goal", "цель")
PROJECT_KEYWORDS = ("project", "проект")

MIN_NAME_WORDS = 2
MIN_DESCRIPTION_WORDS = 10
DEADLINE_WARNING_DAYS = 7


class IntentType(StrEnum):
    """Coarse classification of a free-text message."""

    HELP = "help"
    GENERATE_DESCRIPTION = "generate_description"
    GENERATE_NAME = "generate_name"
    DATE = "date"
    PRIORITY = "priority"
    EMAIL = "email"
    TEXT = "text"


@dataclass
class Intent:
    """Classification result for a single message."""
    type: IntentType
    content: str
    extra: dict[str, str] = field(default_factory=dict)


class IntentAnalyzer:
    """Classifies user messages with keyword and regex heuristics."""

    def classify(self, message: str) -> Intent:
        """Return the first matching intent for a message.

        Checks run in a fixed order: help request, date, priority keyword,
        email, then plain text.
        """
        normalized = message.lower().strip()

        if HELP_PATTERN.search(normalized) or _contains_any(normalized, HELP_STEMS):
            if _contains_any(normalized, DESCRIPTION_STEMS):
                return Intent(type=IntentType.GENERATE_DESCRIPTION, content=normalized)
            if _contains_any(normalized, NAME_STEMS):
                return Intent(type=IntentType.GENERATE_NAME, content=normalized)
            return Intent(type=IntentType.HELP, content=normalized)

        date_match = DATE_PATTERN.search(normalized)
        if date_match:
            return Intent(
                type=IntentType.DATE,
                content=_format_date_match(date_match),
                extra={"raw": date_match.group(0)},
            )

        priority_match = self.detect_priority(normalized)
        if priority_match:
            keyword, priority = priority_match
            return Intent(
                type=IntentType.PRIORITY,
                content=priority.value,
                extra={"keyword": keyword},
            )

        email = self.extract_email(message)
        if email:
            return Intent(type=IntentType.EMAIL, content=email)

        return Intent(type=IntentType.TEXT, content=normalized)

    def extract_date(self, message: str) -> str | None:
        """Find a day-month-year date and normalize it to DD.MM.YYYY."""
        match = DATE_PATTERN.search(message)
        if not match:
            return None
        return _format_date_match(match)

    def detect_priority(self, message: str) -> tuple[str, Priority] | None:
        """Return the first (keyword, priority) pair found in the message."""
        normalized = message.lower()
        for keyword, priority in PRIORITY_KEYWORDS:
            if keyword in normalized:
                return keyword, priority
        return None

    def extract_email(self, message: str) -> str | None:
        match = EMAIL_PATTERN.search(message)
        return match.group(0) if match else None

    def analyze_context(
        self,
        message: str,
        step: WizardStep,
        today: date | None = None,
    ) -> dict[str, str]:
        """Advisory signals for the current step. Never blocks a transition."""
        signals: dict[str, str] = {}
        normalized = message.lower()
        words = message.split()

        if step == WizardStep.NAME:
            if len(words) < MIN_NAME_WORDS:
                signals["suggestion"] = "maybe_extend"
            if _contains_any(normalized, PROJECT_KEYWORDS):
                signals["has_project_word"] = "true"

        elif step == WizardStep.DESCRIPTION:
            if len(words) < MIN_DESCRIPTION_WORDS:
                signals["suggestion"] = "too_short"
            if not _contains_any(normalized, GOAL_KEYWORDS):
                signals["missing"] = "goals"

        elif step == WizardStep.DEADLINE:
            extracted = self.extract_date(message)
            if extracted:
                try:
                    deadline = datetime.strptime(extracted, "%d.%m.%Y").date()
                except ValueError:
                    return signals
                if (deadline - (today or date.today())).days < DEADLINE_WARNING_DAYS:
                    signals["warning"] = "too_soon"

        return signals


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in text for keyword in keywords)


def _format_date_match(match: re.Match[str]) -> str:
    day, month, year = match.groups()
    return f"{day}.{month}.{year}"
