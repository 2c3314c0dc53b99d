"""
Journal controller: the user intents of the journal views.

Each method is one action a view dispatches (sign in, save, delete, ...).
It validates the input the way the forms do, calls the backend adapters and
moves the session state to the view that should follow. Errors propagate as
``JournalError`` subclasses for the HTTP layer to render.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List

from mindful_journal.core.logging_utils import sanitize_for_logging
from mindful_journal.features.auth.models import User
from mindful_journal.features.journal.models import Analysis, EntryDraft, JournalEntry
from mindful_journal.features.session.context import JournalContext
from mindful_journal.features.session.state import AppState, ViewState
from mindful_journal.features.session.sync import SessionSync
from mindful_journal.shared.errors import (
    AnalysisError,
    EntryNotFoundError,
    InputValidationError,
    JournalError,
    NotAuthenticatedError,
)

logger = logging.getLogger("MindfulJournal.Controller")


class JournalController:
    """Dispatch target for the auth form, entry list and entry editor."""

    def __init__(
        self,
        context: JournalContext,
        sync: SessionSync,
        editor_min_analysis_length: int = 20,
    ) -> None:
        self.context = context
        self.sync = sync
        self.editor_min_analysis_length = editor_min_analysis_length

    @property
    def state(self) -> AppState:
        return self.context.state

    @contextmanager
    def _loading(self) -> Iterator[None]:
        self.state.is_loading = True
        try:
            yield
        finally:
            self.state.is_loading = False

    def _require_user(self) -> User:
        if self.state.user is None:
            raise NotAuthenticatedError()
        return self.state.user

    # =========================================================================
    # AUTH FORM
    # =========================================================================

    async def login(self, email: str, password: str) -> User:
        if not email or not password:
            raise InputValidationError("Email and password are required")

        with self._loading():
            user = await self.context.auth.sign_in(email, password)
            self.state.authenticate(user)
            await self.sync.refresh_entries()
        return user

    async def signup(self, email: str, name: str, password: str) -> User:
        if not email or not password:
            raise InputValidationError("Email and password are required")
        if not name:
            raise InputValidationError("Name is required")

        with self._loading():
            user = await self.context.auth.sign_up(email, password, name)
            self.state.authenticate(user)
            await self.sync.refresh_entries()
        return user

    async def logout(self) -> None:
        """Sign out. Clearing the state is left to the SignedOut event."""
        await self.context.auth.sign_out()

    # =========================================================================
    # ENTRY LIST
    # =========================================================================

    def loaded_entries(self) -> List[JournalEntry]:
        self._require_user()
        return self.state.entries

    async def reload_entries(self) -> List[JournalEntry]:
        """
        Re-fetch the entry list on explicit request.

        Unlike the background refresh, a failed fetch raises EntryFetchError
        here and the entries already on screen are kept.
        """
        user = self._require_user()
        with self._loading():
            entries = await self.context.entries.fetch_all(raise_errors=True)
        if self.sync.holds_user(user.id):
            self.state.entries = entries
        return entries

    async def delete_entry(self, entry_id: str) -> None:
        self._require_user()
        await self.context.entries.remove(entry_id)
        if self.state.current_entry is not None and self.state.current_entry.id == entry_id:
            self.state.current_entry = None
        await self.sync.refresh_entries()

    # =========================================================================
    # EDITOR
    # =========================================================================

    def open_new_entry(self) -> None:
        self._require_user()
        self.state.current_entry = None
        self.state.view = ViewState.CREATE

    def open_entry(self, entry_id: str) -> JournalEntry:
        self._require_user()
        entry = next((e for e in self.state.entries if e.id == entry_id), None)
        if entry is None:
            raise EntryNotFoundError(details={"entry_id": entry_id})
        self.state.current_entry = entry
        self.state.view = ViewState.EDIT
        return entry

    def close_editor(self) -> None:
        self._require_user()
        self.state.current_entry = None
        self.state.view = ViewState.LIST

    async def save_entry(self, draft: EntryDraft) -> JournalEntry:
        """Persist the draft, reload the list and go back to it."""
        user = self._require_user()
        if not draft.content.strip():
            raise InputValidationError("Content cannot be empty.")

        with self._loading():
            entry = await self.context.entries.save(draft, user.id)
            await self.sync.refresh_entries()
        self.state.current_entry = None
        self.state.view = ViewState.LIST
        return entry

    async def analyze_draft(self, content: str) -> Analysis:
        """
        Ask for an AI reflection on the editor content.

        The editor asks for more text than the analyzer's own minimum. Any
        failure leaves the draft untouched and savable.
        """
        self._require_user()
        if len(content or "") < self.editor_min_analysis_length:
            raise InputValidationError("Please write a bit more before asking for AI analysis.")

        try:
            return await self.context.analyzer.analyze(content)
        except JournalError:
            raise
        except Exception as exc:
            logger.error("Failed to analyze entry: %s", sanitize_for_logging(exc))
            raise AnalysisError() from exc
