"""Explicit wiring of the collaborators one journal session works with."""

from dataclasses import dataclass, field

from mindful_journal.core.config import Config, settings
from mindful_journal.features.analysis.service import EntryAnalyzer
from mindful_journal.features.auth.backend import AuthBackend, SupabaseAuthBackend
from mindful_journal.features.database.repositories.entries import EntriesRepository
from mindful_journal.features.session.state import AppState


@dataclass
class JournalContext:
    """Backend adapters plus the in-memory state they feed."""
    auth: AuthBackend
    entries: EntriesRepository
    analyzer: EntryAnalyzer
    state: AppState = field(default_factory=AppState)


def build_context(supabase_client, config: Config = settings) -> JournalContext:
    """Build a context over a Supabase client using the given settings."""
    return JournalContext(
        auth=SupabaseAuthBackend(supabase_client),
        entries=EntriesRepository(supabase_client, table=config.ENTRIES_TABLE),
        analyzer=EntryAnalyzer(
            api_key=config.ANTHROPIC_API_KEY,
            model=config.CLAUDE_MODEL,
            min_length=config.ANALYSIS_MIN_LENGTH,
            max_tokens=config.ANALYSIS_MAX_TOKENS,
        ),
    )
