"""
Session API Routes

Read-only snapshot of the session: phase, current view, signed-in user and
the entry open in the editor. Clients poll it after startup to know when
INITIALIZING is over.
"""

from fastapi import APIRouter, Depends

from mindful_journal.api.dependencies import get_controller
from mindful_journal.api.models import SessionResponse
from mindful_journal.features.journal.controller import JournalController

router = APIRouter(tags=["Session"])


@router.get("/session", response_model=SessionResponse)
async def get_session(controller: JournalController = Depends(get_controller)) -> SessionResponse:
    return SessionResponse.from_state(controller.state)
