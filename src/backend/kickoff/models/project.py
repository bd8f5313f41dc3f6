"""Project record models built up by the creation wizard."""

from enum import StrEnum

from pydantic import BaseModel, Field


class ProjectStatus(StrEnum):
    """Lifecycle status of a project."""

    PLANNED = "PLANNED"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"


class Priority(StrEnum):
    """Project priority levels."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class TeamRole(StrEnum):
    """Access role of a team member within a project."""

    MANAGER = "MANAGER"
    EDITOR = "EDITOR"
    READER = "READER"


# Accepted spellings, keyed by their uppercase form
PRIORITY_ALIASES: dict[str, Priority] = {
    "HIGH": Priority.HIGH,
    "MEDIUM": Priority.MEDIUM,
    "LOW": Priority.LOW,
    "ВЫСОКИЙ": Priority.HIGH,
    "СРЕДНИЙ": Priority.MEDIUM,
    "НИЗКИЙ": Priority.LOW,
}


def parse_priority(value: str | None) -> Priority | None:
    """Map a priority literal (any case, English or Russian) to a Priority."""
    if not value:
        return None
    return PRIORITY_ALIASES.get(value.strip().upper())


class TeamMember(BaseModel):
    """A user attached to the project.

    Email and role are kept as plain text so that a bad value can sit in the
    record and be reported by the validator.
    """

    id: str = ""
    name: str = ""
    lastname: str = ""
    email: str = ""
    role: str = TeamRole.READER.value
    photo: str = ""


class ProjectRecord(BaseModel):
    """The project under construction."""

    name: str = ""
    description: str = ""
    deadline: str = Field("", description="Deadline as DD.MM.YYYY")
    status: ProjectStatus = ProjectStatus.IN_PROGRESS
    priority: str = Priority.MEDIUM.value
    team: list[TeamMember] = Field(default_factory=list)
    budget: str = "0"
    spent: str = "0"
    confidentiality: str = "Members only"
    progress: int = Field(0, ge=0, le=100)
