"""In-memory session state shared by the session sync and the controller."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from mindful_journal.features.auth.models import User
from mindful_journal.features.journal.models import JournalEntry


class SessionPhase(str, Enum):
    INITIALIZING = "INITIALIZING"
    AUTHENTICATED = "AUTHENTICATED"
    ANONYMOUS = "ANONYMOUS"


class ViewState(str, Enum):
    AUTH = "AUTH"
    LIST = "LIST"
    CREATE = "CREATE"
    EDIT = "EDIT"


@dataclass
class AppState:
    """
    The ``{user, entries, view}`` triple plus bookkeeping.

    Only mutated from the event loop; the transition helpers below keep
    phase and view consistent with each other.
    """
    phase: SessionPhase = SessionPhase.INITIALIZING
    view: ViewState = ViewState.AUTH
    user: Optional[User] = None
    entries: List[JournalEntry] = field(default_factory=list)
    current_entry: Optional[JournalEntry] = None
    is_loading: bool = False

    @property
    def is_initializing(self) -> bool:
        return self.phase is SessionPhase.INITIALIZING

    def authenticate(self, user: User) -> None:
        self.user = user
        self.phase = SessionPhase.AUTHENTICATED
        self.view = ViewState.LIST

    def mark_anonymous(self) -> None:
        self.phase = SessionPhase.ANONYMOUS
        self.view = ViewState.AUTH

    def clear_session(self) -> None:
        self.user = None
        self.entries = []
        self.current_entry = None
        self.mark_anonymous()
