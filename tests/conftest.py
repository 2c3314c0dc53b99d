# shared fixtures for journal tests
# in-memory fakes for the supabase auth client and the postgrest query chain,
# so the real adapters, session sync and controller run against them

import asyncio
import itertools
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from supabase import AuthError

from mindful_journal.features.analysis.prompts import ANALYSIS_TOOL_NAME
from mindful_journal.features.analysis.service import EntryAnalyzer
from mindful_journal.features.auth.backend import SupabaseAuthBackend
from mindful_journal.features.database.repositories.entries import EntriesRepository
from mindful_journal.features.journal.controller import JournalController
from mindful_journal.features.session.context import JournalContext
from mindful_journal.features.session.sync import SessionSync


USER_ID = "user-1"
USER_EMAIL = "alex.rivera@email.com"
USER_PASSWORD = "journal123"

OTHER_USER_ID = "user-2"
OTHER_EMAIL = "jordan.kim@email.com"

# short enough to keep the suite fast, long enough to not flake
LOOKUP_TIMEOUT = 0.05


SAMPLE_ANALYSIS = {
    "sentiment": "Positive",
    "sentimentScore": 0.6,
    "tags": ["gratitude", "family"],
    "summary": "A calm day spent with family.",
    "advice": "Keep noticing the small good moments.",
    "moodEmoji": "😊",
}

SAMPLE_ROWS = [
    {
        "id": "e1",
        "user_id": USER_ID,
        "title": "Day One",
        "content": "Started the journal today.",
        "date": "2025-06-10T12:00:00+00:00",
        "updated_at": "2025-06-10T12:00:00+00:00",
        "analysis": None,
    },
    {
        "id": "e2",
        "user_id": USER_ID,
        "title": "",
        "content": "Dinner with my parents, felt grateful.",
        "date": "2025-06-13T12:00:00+00:00",
        "updated_at": "2025-06-13T12:00:00+00:00",
        "analysis": SAMPLE_ANALYSIS,
    },
    {
        "id": "e3",
        "user_id": USER_ID,
        "title": "Rough week",
        "content": "Deadlines everywhere.",
        "date": "2025-06-11T12:00:00+00:00",
        "updated_at": "2025-06-11T12:00:00+00:00",
        "analysis": None,
    },
]


# postgrest fakes

class FakeAPIError(Exception):
    """stands in for postgrest's APIError"""


class FakeQuery:
    """mimics the postgrest request builder chain used by the repository"""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None

    def select(self, *columns):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    async def execute(self):
        self.db.calls.append((self.op, self.table, self.payload, list(self.filters)))
        if self.db.query_delay:
            await asyncio.sleep(self.db.query_delay)
        if self.op in self.db.fail_on:
            raise FakeAPIError(self.db.fail_message or f"{self.op} failed")

        rows = self.db.tables.setdefault(self.table, [])
        matched = [
            row for row in rows
            if all(str(row.get(col)) == str(val) for col, val in self.filters)
        ]

        if self.op == "select":
            data = [dict(row) for row in matched]
            if self.order_by:
                column, desc = self.order_by
                data.sort(key=lambda row: row[column], reverse=desc)
        elif self.op == "insert":
            row = dict(self.payload)
            row.setdefault("id", f"new-{next(self.db.ids)}")
            rows.append(row)
            data = [dict(row)]
        elif self.op == "update":
            for row in matched:
                row.update(self.payload)
            data = [dict(row) for row in matched]
        else:
            for row in matched:
                rows.remove(row)
            data = [dict(row) for row in matched]

        return SimpleNamespace(data=data)


# supabase auth fakes

class InvalidCredentials(AuthError):
    """auth error raised by the fake, independent of AuthError's constructor"""

    def __init__(self, message):
        Exception.__init__(self, message)
        self.message = message


class FakeAuthClient:
    """mimics supabase's async auth client, including state change callbacks"""

    def __init__(self):
        self.accounts = {}
        self.session = None
        self.confirm_email = False
        self.lookup_delay = 0.0
        self.lookup_error = None
        self.session_lookups = 0
        self._subscribers = {}
        self._keys = itertools.count(1)

    def register(self, email, password, name=None, user_id=None):
        user = SimpleNamespace(
            id=user_id or f"user-{len(self.accounts) + 1}",
            email=email,
            user_metadata={"name": name} if name else {},
        )
        self.accounts[email] = (password, user)
        return user

    def start_session(self, email):
        user = self.accounts[email][1]
        self.session = SimpleNamespace(user=user, access_token="token")
        return self.session

    async def get_session(self):
        self.session_lookups += 1
        if self.lookup_delay:
            await asyncio.sleep(self.lookup_delay)
        if self.lookup_error:
            raise self.lookup_error
        return self.session

    async def sign_in_with_password(self, credentials):
        account = self.accounts.get(credentials["email"])
        if account is None or account[0] != credentials["password"]:
            raise InvalidCredentials("Invalid login credentials")
        session = self.start_session(credentials["email"])
        self.emit("SIGNED_IN", session)
        return SimpleNamespace(user=session.user, session=session)

    async def sign_up(self, credentials):
        email = credentials["email"]
        if email in self.accounts:
            raise InvalidCredentials("User already registered")
        name = credentials.get("options", {}).get("data", {}).get("name")
        user = self.register(email, credentials["password"], name=name)
        if self.confirm_email:
            return SimpleNamespace(user=user, session=None)
        session = self.start_session(email)
        self.emit("SIGNED_IN", session)
        return SimpleNamespace(user=user, session=session)

    async def sign_out(self):
        self.session = None
        self.emit("SIGNED_OUT", None)

    def on_auth_state_change(self, callback):
        key = next(self._keys)
        self._subscribers[key] = callback
        return SimpleNamespace(
            id=key,
            callback=callback,
            unsubscribe=lambda: self._subscribers.pop(key, None),
        )

    @property
    def subscriber_count(self):
        return len(self._subscribers)

    def emit(self, event, session):
        for callback in list(self._subscribers.values()):
            callback(event, session)


class FakeSupabase:
    """the slice of supabase's AsyncClient the journal uses"""

    def __init__(self):
        self.auth = FakeAuthClient()
        self.tables = {}
        self.calls = []
        self.fail_on = set()
        self.ids = itertools.count(1)
        self.query_delay = 0
        self.fail_message = None

    def table(self, name):
        return FakeQuery(self, name)

    def seed(self, rows, table="entries"):
        self.tables[table] = [dict(row) for row in rows]

    def count(self, op, table="entries"):
        return len([call for call in self.calls if call[0] == op and call[1] == table])


def tool_response(payload):
    """anthropic messages response carrying a forced tool call"""
    return SimpleNamespace(
        content=[SimpleNamespace(type="tool_use", name=ANALYSIS_TOOL_NAME, input=payload)],
        usage=SimpleNamespace(input_tokens=120, output_tokens=60),
    )


# fixtures

@pytest.fixture
def supabase():
    fake = FakeSupabase()
    fake.auth.register(USER_EMAIL, USER_PASSWORD, name="Alex Rivera", user_id=USER_ID)
    fake.seed(SAMPLE_ROWS)
    return fake


@pytest.fixture
def anthropic_client():
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=tool_response(SAMPLE_ANALYSIS))
    return client


@pytest.fixture
def analyzer(anthropic_client):
    return EntryAnalyzer(client=anthropic_client, model="claude-test")


@pytest.fixture
def context(supabase, analyzer):
    return JournalContext(
        auth=SupabaseAuthBackend(supabase),
        entries=EntriesRepository(supabase),
        analyzer=analyzer,
    )


@pytest_asyncio.fixture
async def sync(context):
    session_sync = SessionSync(context, lookup_timeout=LOOKUP_TIMEOUT)
    yield session_sync
    session_sync.stop()
    await session_sync.wait_idle()


@pytest.fixture
def controller(context, sync):
    return JournalController(context, sync, editor_min_analysis_length=20)


@pytest_asyncio.fixture
async def anonymous_controller(controller):
    """controller after a startup that found no session"""
    await controller.sync.start()
    await controller.sync.wait_idle()
    return controller


@pytest_asyncio.fixture
async def signed_in_controller(supabase, controller):
    """controller after a startup that found an existing session"""
    supabase.auth.start_session(USER_EMAIL)
    await controller.sync.start()
    await controller.sync.wait_idle()
    return controller


def _client_for(controller):
    from mindful_journal.main import app

    app.state.controller = controller
    transport = ASGITransport(app=app)
    return app, AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def client(anonymous_controller):
    app, http = _client_for(anonymous_controller)
    async with http as ac:
        yield ac
    app.state.controller = None


@pytest_asyncio.fixture
async def auth_client(signed_in_controller):
    app, http = _client_for(signed_in_controller)
    async with http as ac:
        yield ac
    app.state.controller = None
