"""Pytest configuration and fixtures."""

import itertools
import os
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import httpx
import pytest
from httpx import AsyncClient, ASGITransport

os.environ["ANTHROPIC_API_KEY"] = "test-key"
os.environ["SUPABASE_URL"] = "http://supabase.test"
os.environ["SUPABASE_KEY"] = "test-key"
os.environ["SLACK_WEBHOOK_URL"] = "https://hooks.slack.test/services/T000/B000/XXXX"
os.environ["SLACK_NOTIFY_USER_IDS"] = ""
os.environ["SLACK_NOTIFY_CHANNEL"] = ""
os.environ["RETUNE_ENABLED"] = "false"

from backend.app.models.evaluation import QualitativeEvaluation  # noqa: E402
from backend.app.models.tone_signature import SignatureTraits  # noqa: E402
from backend.app.services.evaluation_store import EvaluationStore  # noqa: E402
from backend.app.services.notifier import SlackNotifier  # noqa: E402
from backend.app.services.review_store import ReviewStore  # noqa: E402
from backend.app.services.signature_store import SignatureStore  # noqa: E402

from .fakes import FakeOracle, GOOD_EVALUATION, SIGNATURE_TRAITS  # noqa: E402


_CLOCK_START = datetime.now(timezone.utc)
_ticks = itertools.count()


def _timestamp() -> str:
    """Strictly increasing timestamps so row order is deterministic."""
    return (_CLOCK_START + timedelta(milliseconds=next(_ticks))).isoformat()


class MockResponse:
    def __init__(self, data: List[dict], count: Optional[int] = None):
        self.data = data
        self.count = count


class MockQuery:
    """In-memory stand-in for the PostgREST query builder."""

    def __init__(self, rows: List[dict]):
        self._rows = rows
        self._operation = None
        self._payload = None
        self._columns = "*"
        self._count = None
        self._on_conflict = None
        self._filters = []
        self._order = None
        self._range = None

    def select(self, columns="*", count=None):
        self._operation = "select"
        self._columns = columns
        self._count = count
        return self

    def insert(self, data):
        self._operation = "insert"
        self._payload = data
        return self

    def upsert(self, data, on_conflict=None):
        self._operation = "upsert"
        self._payload = data
        self._on_conflict = on_conflict
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column, value):
        self._filters.append(lambda row: row.get(column) is not None and row.get(column) >= value)
        return self

    def lte(self, column, value):
        self._filters.append(lambda row: row.get(column) is not None and row.get(column) <= value)
        return self

    def is_(self, column, value):
        self._filters.append(lambda row: row.get(column) is value)
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def _new_row(self, item: dict) -> dict:
        row = dict(item)
        row.setdefault("id", str(uuid.uuid4()))
        now = _timestamp()
        row.setdefault("created_at", now)
        row.setdefault("updated_at", now)
        return row

    def execute(self):
        if self._operation == "insert":
            items = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = [self._new_row(item) for item in items]
            self._rows.extend(inserted)
            return MockResponse([dict(r) for r in inserted])

        if self._operation == "upsert":
            item = self._payload
            key = self._on_conflict
            existing = next((r for r in self._rows if key and r.get(key) == item.get(key)), None)
            if existing is not None:
                existing.update(item)
                return MockResponse([dict(existing)])
            row = self._new_row(item)
            self._rows.append(row)
            return MockResponse([dict(row)])

        result = [r for r in self._rows if all(f(r) for f in self._filters)]
        total = len(result)
        if self._order:
            column, desc = self._order
            result = sorted(result, key=lambda r: r.get(column) or "", reverse=desc)
        if self._range:
            start, end = self._range
            result = result[start:end + 1]
        if self._columns != "*":
            columns = [c.strip() for c in self._columns.split(",")]
            result = [{c: r.get(c) for c in columns} for r in result]
        else:
            result = [dict(r) for r in result]
        return MockResponse(result, total if self._count else None)


class MockSupabaseClient:
    """Mock Supabase client that keeps one row list per table."""

    def __init__(self):
        self._tables: Dict[str, List[dict]] = defaultdict(list)

    def table(self, table_name):
        return MockQuery(self._tables[table_name])

    def rows(self, table_name) -> List[dict]:
        return self._tables[table_name]


@pytest.fixture
def mock_db():
    return MockSupabaseClient()


@pytest.fixture
def signature_store(mock_db):
    return SignatureStore(mock_db)


@pytest.fixture
def evaluation_store(mock_db):
    return EvaluationStore(mock_db)


@pytest.fixture
def review_store(mock_db):
    return ReviewStore(mock_db)


@pytest.fixture
def fake_oracle():
    return FakeOracle(structured={
        SignatureTraits: SIGNATURE_TRAITS,
        QualitativeEvaluation: GOOD_EVALUATION,
    })


@pytest.fixture
def slack_requests():
    """Requests received by the fake Slack endpoint."""
    return []


@pytest.fixture
def slack_http(slack_requests):
    def handler(request: httpx.Request) -> httpx.Response:
        slack_requests.append(request)
        return httpx.Response(200, text="ok")

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def notifier(signature_store, review_store, slack_http):
    return SlackNotifier(signature_store, review_store, http_client=slack_http)


@pytest.fixture(scope="session")
def app():
    """FastAPI app; dependencies are overridden per test."""
    from backend.app.main import app
    return app


@pytest.fixture
async def client(app, mock_db, fake_oracle, notifier):
    """Async HTTP client with the store, oracle and notifier swapped for fakes."""
    from backend.app.api import deps

    app.dependency_overrides[deps.get_db] = lambda: mock_db
    app.dependency_overrides[deps.get_oracle] = lambda: fake_oracle
    app.dependency_overrides[deps.get_notifier] = lambda: notifier
    app.state.supervisor = None

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    app.state.supervisor = None
