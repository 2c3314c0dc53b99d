"""
Entries API Routes

List, save (update when the draft has an id, insert otherwise) and delete
journal entries of the signed-in user.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from mindful_journal.api.dependencies import get_controller
from mindful_journal.features.journal.controller import JournalController
from mindful_journal.features.journal.models import EntryDraft, JournalEntry

router = APIRouter(prefix="/entries", tags=["Entries"])
logger = logging.getLogger("MindfulJournal.API.Entries")


@router.get("", response_model=List[JournalEntry])
async def list_entries(
    refresh: bool = False,
    controller: JournalController = Depends(get_controller),
) -> List[JournalEntry]:
    """
    Entries currently loaded for the session.

    With ``refresh=true`` the list is fetched again first, and a failed
    fetch is reported instead of showing up as an empty journal.
    """
    if refresh:
        return await controller.reload_entries()
    return controller.loaded_entries()


@router.post("", response_model=JournalEntry)
async def save_entry(
    draft: EntryDraft,
    controller: JournalController = Depends(get_controller),
) -> JournalEntry:
    return await controller.save_entry(draft)


@router.delete("/{entry_id}", status_code=204)
async def delete_entry(
    entry_id: str,
    controller: JournalController = Depends(get_controller),
) -> Response:
    await controller.delete_entry(entry_id)
    return Response(status_code=204)
