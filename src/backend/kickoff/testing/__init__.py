"""Conversation flow tooling for the project wizard.

The flow runner is imported lazily so that `python -m kickoff.testing.flow_runner`
does not import the module twice.
"""

__all__ = ["FlowRunner", "FlowSpec", "TurnResult", "check_turn"]


def __getattr__(name: str):
    if name not in __all__:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from kickoff.testing import flow_runner

    return getattr(flow_runner, name)
