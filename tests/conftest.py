import itertools

import pytest

from src.models.leads import Lead
from src.models.riders import Rider
from src.models.users import Viewer
from src.services.activity_log import ActivityLogger
from src.services.notification_service import NotificationService
from src.services.supabase_store import FleetStore


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Chainable stand-in for a supabase-py table query over in-memory rows."""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self._order = None
        self._range = None
        self._limit = None

    def select(self, columns="*"):
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
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def is_(self, column, value):
        assert value == "null"
        self.filters.append(lambda row: row.get(column) is None)
        return self

    def or_(self, expression):
        conditions = []
        for part in expression.split(","):
            column, _, value = part.split(".", 2)
            conditions.append((column, value))
        self.filters.append(lambda row: any(str(row.get(c)) == v for c, v in conditions))
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matches(self, row):
        return all(check(row) for check in self.filters)

    def execute(self):
        self.client.calls.append((self.table, self.op))
        if self.table in self.client.failing:
            raise RuntimeError(f"{self.table} is unavailable")

        rows = self.client.tables.setdefault(self.table, [])

        if self.op == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            inserted = []
            for item in payload:
                row = dict(item)
                row.setdefault("id", f"{self.table}-{next(self.client.ids)}")
                rows.append(row)
                inserted.append(dict(row))
            return FakeResponse(inserted)

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResponse(updated)

        if self.op == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.client.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResponse([dict(row) for row in removed])

        result = [dict(row) for row in rows if self._matches(row)]
        if self._order:
            column, desc = self._order
            result.sort(key=lambda row: str(row.get(column) or ""), reverse=desc)
        if self._range:
            start, end = self._range
            result = result[start:end + 1]
        if self._limit is not None:
            result = result[:self._limit]
        return FakeResponse(result)


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, content, options=None):
        self.storage.uploads.append((self.name, path, content, options))
        return {"path": path}

    def get_public_url(self, path):
        return f"https://storage.test/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.uploads = []

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeSupabase:
    """In-memory client exposing the slice of supabase-py the store uses."""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failing = set()
        self.ids = itertools.count(1)
        self.storage = FakeStorage()

    def table(self, name):
        return FakeQuery(self, name)


@pytest.fixture
def fake_client():
    return FakeSupabase()


@pytest.fixture
def store(fake_client):
    return FleetStore(fake_client)


@pytest.fixture
def notifications(store):
    return NotificationService(store)


@pytest.fixture
def activity(store, notifications):
    return ActivityLogger(store, notifications)


@pytest.fixture
def admin():
    return Viewer(user_id="admin-1", full_name="Asha Admin", role="admin")


@pytest.fixture
def leader():
    return Viewer(user_id="tl-1", full_name="Tarun Leader", role="teamLeader")


@pytest.fixture
def make_lead():
    counter = itertools.count(1)

    def _make(mobile, created_by="tl-1", **fields):
        lead_id = fields.pop("id", f"L{next(counter)}")
        return Lead(id=lead_id, mobile_number=mobile, created_by=created_by, **fields)

    return _make


@pytest.fixture
def make_rider():
    counter = itertools.count(1)

    def _make(mobile, **fields):
        rider_id = fields.pop("id", f"R{next(counter)}")
        return Rider(id=rider_id, mobile_number=mobile, **fields)

    return _make
