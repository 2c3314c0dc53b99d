"""
Editor API Routes

Open the editor on a new draft or an existing entry, and leave it again.
"""

from fastapi import APIRouter, Depends

from mindful_journal.api.dependencies import get_controller
from mindful_journal.api.models import SessionResponse
from mindful_journal.features.journal.controller import JournalController

router = APIRouter(prefix="/editor", tags=["Editor"])


@router.post("/new", response_model=SessionResponse)
async def open_new_entry(controller: JournalController = Depends(get_controller)) -> SessionResponse:
    controller.open_new_entry()
    return SessionResponse.from_state(controller.state)


@router.post("/cancel", response_model=SessionResponse)
async def close_editor(controller: JournalController = Depends(get_controller)) -> SessionResponse:
    controller.close_editor()
    return SessionResponse.from_state(controller.state)


@router.post("/{entry_id}", response_model=SessionResponse)
async def open_entry(
    entry_id: str,
    controller: JournalController = Depends(get_controller),
) -> SessionResponse:
    controller.open_entry(entry_id)
    return SessionResponse.from_state(controller.state)
