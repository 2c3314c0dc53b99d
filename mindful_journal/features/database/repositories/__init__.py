"""Database Repositories - Organized data access."""

from mindful_journal.features.database.repositories.entries import EntriesRepository

__all__ = [
    "EntriesRepository",
]
