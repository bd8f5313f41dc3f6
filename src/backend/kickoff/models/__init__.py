"""Data models for the project creation wizard.

The wizard keeps no server-side state: the conversation context defined here
is handed to the caller after every turn and must be sent back on the next.
"""

from kickoff.models.conversation import (
    ConversationContext,
    ValidationState,
    WizardStep,
)
from kickoff.models.project import (
    PRIORITY_ALIASES,
    Priority,
    ProjectRecord,
    ProjectStatus,
    TeamMember,
    TeamRole,
    parse_priority,
)

__all__ = [
    "ConversationContext",
    "PRIORITY_ALIASES",
    "Priority",
    "ProjectRecord",
    "ProjectStatus",
    "TeamMember",
    "TeamRole",
    "ValidationState",
    "WizardStep",
    "parse_priority",
]
