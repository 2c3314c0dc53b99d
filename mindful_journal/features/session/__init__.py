"""Session bootstrap and auth-state synchronization."""

from mindful_journal.features.session.context import JournalContext, build_context
from mindful_journal.features.session.state import AppState, SessionPhase, ViewState
from mindful_journal.features.session.sync import SessionSync

__all__ = [
    "AppState",
    "JournalContext",
    "SessionPhase",
    "SessionSync",
    "ViewState",
    "build_context",
]
