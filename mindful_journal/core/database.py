"""
Supabase client factory.

The async client is created once per process by the application lifespan
and handed to the auth backend and the entries repository.
"""

import logging
from typing import Optional

from supabase import AsyncClient, acreate_client

from mindful_journal.core.config import settings
from mindful_journal.shared.errors import ConfigurationError

logger = logging.getLogger("MindfulJournal.Database")


async def create_supabase_client(
    url: Optional[str] = None,
    key: Optional[str] = None,
) -> AsyncClient:
    """Create the async Supabase client from explicit values or settings."""
    url = url or settings.SUPABASE_URL
    key = key or settings.SUPABASE_KEY

    if not url or not key:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_KEY must be set")

    client = await acreate_client(url, key)
    logger.info("Supabase client initialized")
    return client
