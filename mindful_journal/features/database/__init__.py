"""
Database Feature Module - Data access over the Supabase entries table.

Usage:
    from mindful_journal.features.database import EntriesRepository

    repo = EntriesRepository(client)
    entries = await repo.fetch_all()
"""

from mindful_journal.features.database.repositories import EntriesRepository

__all__ = [
    "EntriesRepository",
]
