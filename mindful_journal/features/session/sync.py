"""
==============================================================================
SESSION BOOTSTRAP & AUTH-STATE SYNC
==============================================================================

Decides which user, if any, the journal is showing, and keeps that answer
current for the lifetime of the process.

Startup:
1. Subscribe to auth-state events from the backend.
2. Race the backend's session lookup against a fixed timeout; a slow backend
   reads as "no session" so the sign-in view shows up in bounded time.
3. Leave INITIALIZING exactly once, as AUTHENTICATED (entries refresh in the
   background) or ANONYMOUS. Lookup failures are logged, never raised.

Afterwards:
- SignedIn for the user already on screen is ignored, so the echo of the
  startup lookup does not trigger a second refresh.
- SignedIn for a different user, or while the sign-in view is showing,
  re-resolves the session user, adopts it and refreshes the entries.
- SignedOut clears the user and the loaded entries.

``stop()`` unsubscribes and flips a liveness flag; continuations still in
flight then drop their results instead of touching the state. Entry
refreshes also drop their result when the user they started for is gone.
"""

import asyncio
import logging
from typing import Coroutine, Optional, Set

from mindful_journal.features.auth.backend import AuthSubscription
from mindful_journal.features.auth.models import AuthEvent, SignedIn, SignedOut, User
from mindful_journal.features.session.context import JournalContext
from mindful_journal.features.session.state import AppState, SessionPhase, ViewState
from mindful_journal.shared.async_utils import race_with_timeout
from mindful_journal.shared.correlation import CorrelationContext

logger = logging.getLogger("MindfulJournal.Session")

DEFAULT_LOOKUP_TIMEOUT = 3.0


class SessionSync:
    """Startup session resolution plus auth event reconciliation."""

    def __init__(self, context: JournalContext, lookup_timeout: float = DEFAULT_LOOKUP_TIMEOUT):
        self.context = context
        self.lookup_timeout = lookup_timeout
        self._alive = False
        self._started = False
        self._subscription: Optional[AuthSubscription] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def state(self) -> AppState:
        return self.context.state

    @property
    def alive(self) -> bool:
        return self._alive

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def start(self) -> None:
        """Subscribe to auth events and resolve the initial session."""
        if self._started:
            raise RuntimeError("SessionSync can only be started once")
        self._started = True
        self._alive = True

        self._subscription = self.context.auth.subscribe(self._on_auth_event)

        with CorrelationContext("session-bootstrap"):
            await self._bootstrap()

    def stop(self) -> None:
        """Unsubscribe; pending continuations will discard their results."""
        self._alive = False
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        logger.info("Session sync stopped")

    async def wait_idle(self) -> None:
        """Wait until no background refresh or event continuation is running."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # =========================================================================
    # STARTUP
    # =========================================================================

    async def _bootstrap(self) -> None:
        user: Optional[User] = None
        try:
            user = await race_with_timeout(
                self.context.auth.get_session_user(),
                timeout=self.lookup_timeout,
            )
            if user is None:
                logger.info(
                    "No session resolved within %.1fs, starting anonymous",
                    self.lookup_timeout,
                )
        except Exception:
            logger.exception("Auth initialization failed")
        finally:
            if self._alive:
                self._leave_initializing(user)

    def _leave_initializing(self, user: Optional[User]) -> None:
        state = self.state
        if state.phase is not SessionPhase.INITIALIZING:
            # An auth event settled the session while the lookup was pending
            logger.debug("Session already settled as %s", state.phase.value)
            return

        if user is None:
            state.mark_anonymous()
            return

        state.authenticate(user)
        logger.info("Session resolved for user %s", user.id)
        self._spawn(self.refresh_entries())

    # =========================================================================
    # AUTH EVENTS
    # =========================================================================

    def _on_auth_event(self, event: AuthEvent) -> None:
        if not self._alive:
            return

        if isinstance(event, SignedOut):
            logger.info("Signed out, clearing session")
            self.state.clear_session()
        elif isinstance(event, SignedIn):
            self._spawn(self._handle_signed_in(event))

    async def _handle_signed_in(self, event: SignedIn) -> None:
        state = self.state
        held = state.user
        if held is not None and held.id == event.user_id and state.view is not ViewState.AUTH:
            logger.debug("Sign-in event for current user %s ignored", event.user_id)
            return
        await self._adopt_session_user()

    async def _adopt_session_user(self) -> None:
        user = await self.context.auth.get_session_user()
        if not self._alive or user is None:
            return

        state = self.state
        if state.user is not None and state.user.id == user.id and state.view is not ViewState.AUTH:
            # Adopted concurrently (startup lookup, login, or an earlier event)
            return

        state.authenticate(user)
        logger.info("Adopted session user %s", user.id)
        await self.refresh_entries()

    # =========================================================================
    # ENTRIES
    # =========================================================================

    async def refresh_entries(self) -> None:
        """
        Reload the entry list from the backend into the state.

        The result is kept only if the user it was loaded for is still the
        one on screen; a sign-out or user switch while the fetch is in
        flight drops it.
        """
        if not self._alive:
            return

        state = self.state
        owner_id = state.user.id if state.user is not None else None
        state.is_loading = True
        try:
            entries = await self.context.entries.fetch_all()
        finally:
            if self._alive:
                state.is_loading = False

        if not self._alive:
            return
        if not self.holds_user(owner_id):
            logger.info("Discarding entries loaded for %s, session changed", owner_id)
            return
        state.entries = entries

    def holds_user(self, user_id: Optional[str]) -> bool:
        """True while ``user_id`` is the signed-in user of the session."""
        held = self.state.user
        return user_id is not None and held is not None and held.id == user_id

    def _spawn(self, coro: Coroutine) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background session task failed", exc_info=task.exception())
