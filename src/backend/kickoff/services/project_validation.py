"""Project record validation.

Validates the project being assembled by the wizard:
- name: 3-100 characters, letters (Latin or Cyrillic), digits, spaces, '-' and '_'
- description: 10-3000 characters
- deadline: DD.MM.YYYY, not earlier than today
- priority: HIGH, MEDIUM or LOW (or the Russian literals)
- team members: valid email, known role, non-blank name and last name

Single-field validators raise FieldValidationError. The aggregate validators
collect every error into a fresh ValidationState. All functions are pure.
"""

import re
from collections.abc import Callable
from datetime import date, datetime

from kickoff.models.conversation import ValidationState, WizardStep
from kickoff.models.project import ProjectRecord, TeamMember, TeamRole, parse_priority

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 100
MIN_DESCRIPTION_LENGTH = 10
MAX_DESCRIPTION_LENGTH = 3000

DEADLINE_FORMAT = "%d.%m.%Y"
DEADLINE_PATTERN = re.compile(r"\d{2}\.\d{2}\.\d{4}")

NAME_PATTERN = re.compile(r"^[а-яА-ЯёЁa-zA-Z0-9\s\-_]+$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class FieldValidationError(ValueError):
    """A single field failed validation."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class UnknownStepError(ValueError):
    """No validator is defined for the requested wizard step."""


def validate_name(name: str) -> None:
    name = name.strip()
    if len(name) < MIN_NAME_LENGTH:
        raise FieldValidationError(
            "name", f"name must be at least {MIN_NAME_LENGTH} characters long"
        )
    if len(name) > MAX_NAME_LENGTH:
        raise FieldValidationError(
            "name", f"name cannot be longer than {MAX_NAME_LENGTH} characters"
        )
    if not NAME_PATTERN.match(name):
        raise FieldValidationError(
            "name",
            "name may only contain letters, digits, spaces, hyphens and underscores",
        )


def validate_description(description: str) -> None:
    description = description.strip()
    if len(description) < MIN_DESCRIPTION_LENGTH:
        raise FieldValidationError(
            "description",
            f"description must be at least {MIN_DESCRIPTION_LENGTH} characters long",
        )
    if len(description) > MAX_DESCRIPTION_LENGTH:
        raise FieldValidationError(
            "description",
            f"description cannot be longer than {MAX_DESCRIPTION_LENGTH} characters",
        )


def parse_deadline(value: str) -> date:
    """Parse a DD.MM.YYYY deadline. Raises ValueError on bad input.

    Both day and month need two digits, strptime alone would accept 5.3.2027.
    """
    if not DEADLINE_PATTERN.fullmatch(value):
        raise ValueError(f"deadline {value!r} is not in DD.MM.YYYY form")
    return datetime.strptime(value, DEADLINE_FORMAT).date()


def validate_deadline(deadline: str, today: date | None = None) -> None:
    """Check the deadline format and that it is not in the past.

    Args:
        deadline: Deadline text in DD.MM.YYYY form
        today: Reference day, defaults to the current local date
    """
    if not deadline:
        raise FieldValidationError("deadline", "deadline is required")

    try:
        parsed = parse_deadline(deadline)
    except ValueError:
        raise FieldValidationError(
            "deadline", "invalid date format, use DD.MM.YYYY"
        ) from None

    if parsed < (today or date.today()):
        raise FieldValidationError("deadline", "date cannot be in the past")


def validate_priority(priority: str) -> None:
    if parse_priority(priority) is None:
        raise FieldValidationError(
            "priority", "invalid priority, allowed values: HIGH, MEDIUM, LOW"
        )


def validate_team_member(member: TeamMember, field: str = "team") -> None:
    if not EMAIL_PATTERN.match(member.email):
        raise FieldValidationError(field, f"invalid email: {member.email}")

    if member.role not in {role.value for role in TeamRole}:
        raise FieldValidationError(
            field,
            f"invalid role for {member.email}, allowed values: MANAGER, EDITOR, READER",
        )

    if not member.name.strip():
        raise FieldValidationError(field, "member name is required")

    if not member.lastname.strip():
        raise FieldValidationError(field, "member last name is required")


def _validate_team(record: ProjectRecord) -> None:
    for index, member in enumerate(record.team):
        validate_team_member(member, field=f"team[{index}]")


_STEP_VALIDATORS: dict[WizardStep, Callable[[ProjectRecord], None]] = {
    WizardStep.NAME: lambda record: validate_name(record.name),
    WizardStep.DESCRIPTION: lambda record: validate_description(record.description),
    WizardStep.DEADLINE: lambda record: validate_deadline(record.deadline),
    WizardStep.PRIORITY: lambda record: validate_priority(record.priority),
    WizardStep.TEAM: _validate_team,
}


def validate_step(step: WizardStep | str, record: ProjectRecord) -> None:
    """Run the single validator that gates the given step.

    Raises:
        FieldValidationError: If the step's field is invalid
        UnknownStepError: If the step has no validator
    """
    try:
        validator = _STEP_VALIDATORS[WizardStep(step)]
    except (ValueError, KeyError):
        raise UnknownStepError(f"unknown project creation step: {step}") from None
    validator(record)


def validate_project_record(record: ProjectRecord) -> ValidationState:
    """Validate every field and team member, collecting all errors."""
    errors: dict[str, str] = {}

    checks: list[tuple[Callable[..., None], tuple]] = [
        (validate_name, (record.name,)),
        (validate_description, (record.description,)),
        (validate_deadline, (record.deadline,)),
        (validate_priority, (record.priority,)),
    ]
    checks.extend(
        (validate_team_member, (member, f"team[{index}]"))
        for index, member in enumerate(record.team)
    )

    for check, args in checks:
        try:
            check(*args)
        except FieldValidationError as exc:
            errors[exc.field] = exc.message

    return ValidationState.from_results(errors)
