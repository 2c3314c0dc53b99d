import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

_SUPABASE_URL = os.getenv('SUPABASE_URL')
_SUPABASE_KEY = os.getenv('SUPABASE_KEY')

_ANTHROPIC_API_KEY = os.getenv('ANTHROPIC_API_KEY') or os.getenv('CLAUDE_API_KEY')
_CLAUDE_MODEL = os.getenv('CLAUDE_MODEL', 'claude-sonnet-4-5-20250929')
_ANALYSIS_MAX_TOKENS = int(os.getenv('ANALYSIS_MAX_TOKENS', '1024'))

# Startup session lookup is raced against this timeout
_SESSION_LOOKUP_TIMEOUT_MS = int(os.getenv('SESSION_LOOKUP_TIMEOUT_MS', '3000'))

_ANALYSIS_MIN_LENGTH = int(os.getenv('ANALYSIS_MIN_LENGTH', '10'))
_EDITOR_ANALYSIS_MIN_LENGTH = int(os.getenv('EDITOR_ANALYSIS_MIN_LENGTH', '20'))

_ENTRIES_TABLE = os.getenv('ENTRIES_TABLE', 'entries')

_FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:3000')


class Config:
    """Central configuration for the journal service."""

    SERVICE_NAME = 'mindful-journal'

    SUPABASE_URL = _SUPABASE_URL
    SUPABASE_KEY = _SUPABASE_KEY

    ANTHROPIC_API_KEY = _ANTHROPIC_API_KEY
    CLAUDE_MODEL = _CLAUDE_MODEL
    ANALYSIS_MAX_TOKENS = _ANALYSIS_MAX_TOKENS

    SESSION_LOOKUP_TIMEOUT_MS = _SESSION_LOOKUP_TIMEOUT_MS

    ANALYSIS_MIN_LENGTH = _ANALYSIS_MIN_LENGTH
    EDITOR_ANALYSIS_MIN_LENGTH = _EDITOR_ANALYSIS_MIN_LENGTH

    ENTRIES_TABLE = _ENTRIES_TABLE

    FRONTEND_URL = _FRONTEND_URL

    @property
    def session_lookup_timeout(self) -> float:
        """Startup lookup timeout in seconds."""
        return self.SESSION_LOOKUP_TIMEOUT_MS / 1000


settings = Config()
