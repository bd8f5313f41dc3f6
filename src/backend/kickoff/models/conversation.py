"""Conversation state exchanged with the caller on every turn."""

from enum import StrEnum

from pydantic import BaseModel, Field

from kickoff.models.project import ProjectRecord


class WizardStep(StrEnum):
    """Steps of the project creation wizard, in forward order."""

    NAME = "name"
    DESCRIPTION = "description"
    DEADLINE = "deadline"
    PRIORITY = "priority"
    TEAM = "team"
    CONFIRMATION = "confirmation"
    TERMINAL = "terminal"


class ValidationState(BaseModel):
    """Outcome of the most recent validation call."""

    is_valid: bool = False
    errors: dict[str, str] = Field(default_factory=dict)
    warnings: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_results(
        cls,
        errors: dict[str, str],
        warnings: dict[str, str] | None = None,
    ) -> "ValidationState":
        return cls(is_valid=not errors, errors=errors, warnings=warnings or {})


class ConversationContext(BaseModel):
    """Wizard state owned by the caller and sent back on each turn."""

    current_step: WizardStep | None = None
    project_data: ProjectRecord = Field(default_factory=ProjectRecord)
    validation_state: ValidationState = Field(default_factory=ValidationState)
    pending_description: str | None = Field(
        None, description="Generated description awaiting the user's yes/no"
    )

    @property
    def is_new(self) -> bool:
        return self.current_step is None
