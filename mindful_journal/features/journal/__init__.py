from mindful_journal.features.journal.models import (
    Analysis,
    EntryDraft,
    EntryRow,
    JournalEntry,
    Sentiment,
)

__all__ = [
    "Analysis",
    "EntryDraft",
    "EntryRow",
    "JournalEntry",
    "Sentiment",
]
