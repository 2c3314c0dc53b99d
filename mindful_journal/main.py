"""
Mindful Journal service.

One process is one interactive journal session: the lifespan resolves who is
signed in (bounded by the startup lookup timeout), keeps that in sync with
the backend's auth events, and tears the subscription down on shutdown.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mindful_journal.api.endpoints import router
from mindful_journal.core.config import settings
from mindful_journal.core.database import create_supabase_client
from mindful_journal.features.journal.controller import JournalController
from mindful_journal.features.session.context import build_context
from mindful_journal.features.session.sync import SessionSync
from mindful_journal.shared.correlation import CorrelationMiddleware
from mindful_journal.shared.errors import register_exception_handlers
from mindful_journal.shared.logging_config import setup_logging

logger = logging.getLogger("MindfulJournal.Main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: resolve the session. shutdown: unsubscribe and drain."""
    setup_logging(service_name=settings.SERVICE_NAME)
    logger.info("Starting Mindful Journal...")

    client = await create_supabase_client()
    context = build_context(client, settings)
    sync = SessionSync(context, lookup_timeout=settings.session_lookup_timeout)
    app.state.controller = JournalController(
        context,
        sync,
        editor_min_analysis_length=settings.EDITOR_ANALYSIS_MIN_LENGTH,
    )

    await sync.start()
    logger.info("Mindful Journal ready", extra={"phase": context.state.phase.value})
    yield

    logger.info("Shutting down Mindful Journal...")
    sync.stop()
    await sync.wait_idle()


app = FastAPI(
    title="Mindful Journal",
    description="Personal journal with AI reflections on entries",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationMiddleware)

register_exception_handlers(app)

app.include_router(router)


@app.get("/")
async def root():
    return {"message": "Mindful Journal Running"}
