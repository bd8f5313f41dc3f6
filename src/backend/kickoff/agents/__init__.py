"""Conversational agents for the project creation wizard."""

from kickoff.agents.engine import (
    CREATE_PROJECT_ACTION,
    ConversationEngine,
    EngineStateError,
    TurnResult,
)
from kickoff.agents.intent import Intent, IntentAnalyzer, IntentType

__all__ = [
    "CREATE_PROJECT_ACTION",
    "ConversationEngine",
    "EngineStateError",
    "Intent",
    "IntentAnalyzer",
    "IntentType",
    "TurnResult",
]
