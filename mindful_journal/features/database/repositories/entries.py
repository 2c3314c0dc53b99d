"""
Entries Repository - Journal entry data access operations.

Handles all entry-related database operations:
- Listing the signed-in user's entries, newest date first
- Update-or-insert of a draft, chosen by the presence of its id
- Deleting an entry by id

Row-level security on the backend scopes every query to the signed-in user.
"""

import logging
from datetime import datetime, timezone
from typing import List

from mindful_journal.core.logging_utils import sanitize_for_logging
from mindful_journal.features.journal.models import EntryDraft, EntryRow, JournalEntry
from mindful_journal.shared.errors import EntryFetchError, EntryWriteError

logger = logging.getLogger("MindfulJournal.Database.Entries")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class EntriesRepository:
    """Repository for journal entry operations."""

    def __init__(self, client, table: str = "entries"):
        """Initialize with an async Supabase client."""
        self.client = client
        self.table = table

    async def fetch_all(self, raise_errors: bool = False) -> List[JournalEntry]:
        """
        Get all entries ordered by date, newest first.

        A failed fetch is logged and reported as an empty list unless
        ``raise_errors`` is set, in which case ``EntryFetchError`` is raised.
        """
        try:
            result = await self.client.table(self.table).select("*").order(
                "date", desc=True
            ).execute()
            return [EntryRow.model_validate(row).to_entry() for row in result.data or []]
        except Exception as e:
            logger.error(f"Error fetching entries: {sanitize_for_logging(e)}")
            if raise_errors:
                raise EntryFetchError() from e
            return []

    async def save(self, draft: EntryDraft, owner_id: str) -> JournalEntry:
        """
        Persist a draft and return the stored entry.

        Drafts with an id are updated in place, the rest are inserted. On
        both paths the date defaults to now and ``updated_at`` is refreshed.
        """
        now = _utc_now_iso()
        payload = {
            "title": draft.title,
            "content": draft.content,
            "date": draft.date or now,
            "updated_at": now,
            "analysis": draft.analysis.to_row() if draft.analysis else None,
        }

        try:
            if draft.id:
                result = await self.client.table(self.table).update(payload).eq(
                    "id", draft.id
                ).execute()
            else:
                payload["user_id"] = owner_id
                result = await self.client.table(self.table).insert(payload).execute()

            if not result.data:
                raise LookupError(f"no row returned for entry {draft.id or '<new>'}")

            entry = EntryRow.model_validate(result.data[0]).to_entry()
        except Exception as e:
            logger.error(f"Error saving entry {draft.id or '<new>'}: {sanitize_for_logging(e)}")
            raise EntryWriteError() from e

        logger.info(f"Entry {'updated' if draft.id else 'created'}: {entry.id}")
        return entry

    async def remove(self, entry_id: str) -> None:
        """Delete an entry by id."""
        try:
            await self.client.table(self.table).delete().eq("id", entry_id).execute()
        except Exception as e:
            logger.error(f"Error deleting entry {entry_id}: {sanitize_for_logging(e)}")
            raise EntryWriteError("Failed to delete entry.") from e

        logger.info(f"Entry deleted: {entry_id}")
