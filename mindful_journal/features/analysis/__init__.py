"""
Analysis feature module.

AI reflection on a journal entry: sentiment, score, tags, summary, advice
and a mood emoji.
"""

from mindful_journal.features.analysis.service import EntryAnalyzer

__all__ = [
    "EntryAnalyzer",
]
