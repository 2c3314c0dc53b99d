# tests for session sync - startup lookup under a deadline, auth event reconciliation

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from mindful_journal.features.auth.backend import AuthSubscription
from mindful_journal.features.session.state import SessionPhase, ViewState
from mindful_journal.features.session.sync import SessionSync
from tests.conftest import LOOKUP_TIMEOUT, OTHER_EMAIL, USER_EMAIL, USER_ID


class TestStartup:
    """leaving INITIALIZING"""

    async def test_starts_initializing(self, sync):
        assert sync.state.phase is SessionPhase.INITIALIZING
        assert sync.state.is_initializing

    async def test_existing_session_authenticates(self, sync, supabase):
        supabase.auth.start_session(USER_EMAIL)
        await sync.start()

        assert sync.state.phase is SessionPhase.AUTHENTICATED
        assert sync.state.view is ViewState.LIST
        assert sync.state.user.id == USER_ID

        await sync.wait_idle()
        assert [e.id for e in sync.state.entries] == ["e2", "e3", "e1"]
        assert supabase.count("select") == 1

    async def test_no_session_goes_anonymous(self, sync, supabase):
        await sync.start()
        await sync.wait_idle()

        assert sync.state.phase is SessionPhase.ANONYMOUS
        assert sync.state.view is ViewState.AUTH
        assert sync.state.user is None
        assert supabase.count("select") == 0

    async def test_slow_lookup_goes_anonymous_at_timeout(self, sync, supabase):
        supabase.auth.start_session(USER_EMAIL)
        supabase.auth.lookup_delay = 5.0

        loop = asyncio.get_running_loop()
        started = loop.time()
        await sync.start()
        elapsed = loop.time() - started

        assert sync.state.phase is SessionPhase.ANONYMOUS
        assert sync.state.view is ViewState.AUTH
        assert elapsed < 1.0

    async def test_sign_in_event_after_timeout_adopts_user(self, sync, supabase):
        supabase.auth.lookup_delay = 5.0
        await sync.start()
        assert sync.state.phase is SessionPhase.ANONYMOUS

        supabase.auth.lookup_delay = 0
        session = supabase.auth.start_session(USER_EMAIL)
        supabase.auth.emit("SIGNED_IN", session)
        await sync.wait_idle()

        assert sync.state.phase is SessionPhase.AUTHENTICATED
        assert sync.state.user.id == USER_ID
        assert len(sync.state.entries) == 3
        assert supabase.count("select") == 1

    async def test_lookup_error_still_leaves_initializing(self, context):
        auth = MagicMock()
        auth.get_session_user = AsyncMock(side_effect=RuntimeError("boom"))
        auth.subscribe = MagicMock(return_value=AuthSubscription(lambda: None))
        context.auth = auth

        session_sync = SessionSync(context, lookup_timeout=LOOKUP_TIMEOUT)
        await session_sync.start()

        assert session_sync.state.phase is SessionPhase.ANONYMOUS
        session_sync.stop()

    async def test_start_twice_rejected(self, sync):
        await sync.start()
        with pytest.raises(RuntimeError):
            await sync.start()

    async def test_subscribes_before_lookup(self, sync, supabase):
        await sync.start()
        assert supabase.auth.subscriber_count == 1


class TestSignedIn:
    """sign-in events for the held or another user"""

    async def test_repeated_event_for_held_user_does_not_refresh(self, sync, supabase):
        session = supabase.auth.start_session(USER_EMAIL)
        await sync.start()
        await sync.wait_idle()
        assert supabase.count("select") == 1

        supabase.auth.emit("SIGNED_IN", session)
        supabase.auth.emit("SIGNED_IN", session)
        await sync.wait_idle()

        assert supabase.count("select") == 1

    async def test_event_echoing_startup_lookup_refreshes_once(self, sync, supabase):
        session = supabase.auth.start_session(USER_EMAIL)
        start = asyncio.ensure_future(sync.start())
        await asyncio.sleep(0)
        supabase.auth.emit("SIGNED_IN", session)
        await start
        await sync.wait_idle()

        assert sync.state.user.id == USER_ID
        assert supabase.count("select") == 1

    async def test_two_events_while_anonymous_refresh_once(self, sync, supabase):
        await sync.start()
        session = supabase.auth.start_session(USER_EMAIL)
        supabase.auth.emit("SIGNED_IN", session)
        supabase.auth.emit("SIGNED_IN", session)
        await sync.wait_idle()

        assert sync.state.phase is SessionPhase.AUTHENTICATED
        assert supabase.count("select") == 1

    async def test_event_for_different_user_switches_and_refreshes(self, sync, supabase):
        supabase.auth.start_session(USER_EMAIL)
        await sync.start()
        await sync.wait_idle()

        supabase.auth.register(OTHER_EMAIL, "pw", name="Jordan", user_id="user-2")
        other = supabase.auth.start_session(OTHER_EMAIL)
        supabase.auth.emit("SIGNED_IN", other)
        await sync.wait_idle()

        assert sync.state.user.id == "user-2"
        assert sync.state.user.name == "Jordan"
        assert supabase.count("select") == 2

    async def test_event_without_resolvable_session_is_ignored(self, sync, supabase):
        await sync.start()
        session = supabase.auth.start_session(USER_EMAIL)
        supabase.auth.session = None
        supabase.auth.emit("SIGNED_IN", session)
        await sync.wait_idle()

        assert sync.state.phase is SessionPhase.ANONYMOUS
        assert supabase.count("select") == 0


class TestSignedOut:
    """sign-out clears the session"""

    async def test_clears_user_and_entries(self, sync, supabase):
        supabase.auth.start_session(USER_EMAIL)
        await sync.start()
        await sync.wait_idle()
        sync.state.current_entry = sync.state.entries[0]
        sync.state.view = ViewState.EDIT

        supabase.auth.emit("SIGNED_OUT", None)

        assert sync.state.user is None
        assert sync.state.entries == []
        assert sync.state.current_entry is None
        assert sync.state.phase is SessionPhase.ANONYMOUS
        assert sync.state.view is ViewState.AUTH

    async def test_sign_out_during_startup_wins(self, sync, supabase):
        supabase.auth.start_session(USER_EMAIL)
        supabase.auth.lookup_delay = LOOKUP_TIMEOUT / 5
        start = asyncio.ensure_future(sync.start())
        await asyncio.sleep(0)
        supabase.auth.emit("SIGNED_OUT", None)
        await start
        await sync.wait_idle()

        assert sync.state.phase is SessionPhase.ANONYMOUS
        assert sync.state.user is None
        assert supabase.count("select") == 0

    async def test_refresh_in_flight_during_sign_out_is_dropped(self, sync, supabase):
        supabase.auth.start_session(USER_EMAIL)
        await sync.start()
        await sync.wait_idle()

        supabase.query_delay = 0.01
        refresh = asyncio.ensure_future(sync.refresh_entries())
        await asyncio.sleep(0)
        supabase.auth.emit("SIGNED_OUT", None)
        await refresh

        assert supabase.count("select") == 2
        assert sync.state.user is None
        assert sync.state.entries == []
        assert sync.state.is_loading is False


class TestStop:
    """teardown discards late results"""

    async def test_unsubscribes(self, sync, supabase):
        await sync.start()
        sync.stop()
        assert supabase.auth.subscriber_count == 0
        assert not sync.alive

    async def test_events_after_stop_ignored(self, sync, supabase):
        await sync.start()
        listener = list(supabase.auth._subscribers.values())[0]
        sync.stop()

        listener("SIGNED_IN", supabase.auth.start_session(USER_EMAIL))
        await sync.wait_idle()

        assert sync.state.phase is SessionPhase.ANONYMOUS
        assert sync.state.user is None

    async def test_pending_lookup_discarded(self, sync, supabase):
        supabase.auth.start_session(USER_EMAIL)
        supabase.auth.lookup_delay = LOOKUP_TIMEOUT / 5
        start = asyncio.ensure_future(sync.start())
        await asyncio.sleep(0)
        sync.stop()
        await start

        assert sync.state.phase is SessionPhase.INITIALIZING
        assert sync.state.user is None

    async def test_pending_adoption_discarded(self, sync, supabase):
        await sync.start()
        session = supabase.auth.start_session(USER_EMAIL)
        supabase.auth.lookup_delay = LOOKUP_TIMEOUT / 5
        supabase.auth.emit("SIGNED_IN", session)
        sync.stop()
        await sync.wait_idle()

        assert sync.state.user is None
        assert supabase.count("select") == 0

    async def test_refresh_result_dropped_after_stop(self, sync, supabase):
        supabase.auth.start_session(USER_EMAIL)
        await sync.start()
        sync.stop()
        await sync.wait_idle()

        assert sync.state.entries == []
        assert sync.state.is_loading is False
        assert supabase.count("select") == 0

    async def test_stop_mid_refresh_leaves_state_alone(self, sync, supabase):
        supabase.auth.start_session(USER_EMAIL)
        supabase.query_delay = 0.01
        await sync.start()
        await asyncio.sleep(0)
        assert sync.state.is_loading is True

        sync.stop()
        await sync.wait_idle()

        assert supabase.count("select") == 1
        assert sync.state.entries == []
        assert sync.state.is_loading is True
