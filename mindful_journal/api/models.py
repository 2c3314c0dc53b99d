from pydantic import BaseModel
from typing import Optional

from mindful_journal.features.auth.models import User
from mindful_journal.features.journal.models import JournalEntry
from mindful_journal.features.session.state import AppState, SessionPhase, ViewState

# =========================================================================
# AUTH FORM MODELS
# =========================================================================

# Fields default to "" so the form's own messages ("Email and password are
# required") are returned instead of a schema error.

class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""

class SignupRequest(BaseModel):
    email: str = ""
    name: str = ""
    password: str = ""

# =========================================================================
# EDITOR MODELS
# =========================================================================

class AnalyzeRequest(BaseModel):
    content: str = ""

# =========================================================================
# SESSION SNAPSHOT
# =========================================================================

class SessionResponse(BaseModel):
    phase: SessionPhase
    view: ViewState
    is_loading: bool
    user: Optional[User] = None
    current_entry: Optional[JournalEntry] = None
    entry_count: int = 0

    @classmethod
    def from_state(cls, state: AppState) -> "SessionResponse":
        return cls(
            phase=state.phase,
            view=state.view,
            is_loading=state.is_loading,
            user=state.user,
            current_entry=state.current_entry,
            entry_count=len(state.entries),
        )
