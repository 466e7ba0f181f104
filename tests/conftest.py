# =============================================================================
# tests/conftest.py
# Pytest Configuration and Fixtures
# =============================================================================

import copy
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest


# =============================================================================
# FAKES
# =============================================================================

class SessionState(dict):
    """dict with attribute access, like ``st.session_state``"""

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __setattr__(self, name, value):
        self[name] = value

    def __delattr__(self, name):
        del self[name]


class FakeQuery:
    """One chained postgrest call: table(..).select/upsert/delete(..).execute()"""

    def __init__(self, client, table):
        self.client = client
        self.table = table
        self.op = None
        self.bounds = None
        self.payload = None
        self.filter = None

    def select(self, columns="*"):
        self.op = "select"
        return self

    def range(self, start, end):
        self.bounds = (start, end)
        return self

    def upsert(self, payload):
        self.op = "upsert"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filter = (column, value)
        return self

    def execute(self):
        self.client.calls.append((self.table, self.op))
        if self.table in self.client.failing or (self.table, self.op) in self.client.failing:
            raise RuntimeError(f"{self.table} unavailable")

        rows = self.client.tables.setdefault(self.table, {})
        if self.op == "select":
            data = list(rows.values())
            if self.bounds:
                data = data[self.bounds[0]:self.bounds[1] + 1]
            return SimpleNamespace(data=copy.deepcopy(data))
        if self.op == "upsert":
            for row in self.payload:
                rows[row["id"]] = copy.deepcopy(row)
            return SimpleNamespace(data=self.payload)
        if self.op == "delete":
            rows.pop(self.filter[1], None)
            return SimpleNamespace(data=[])
        raise AssertionError(f"unexpected operation {self.op}")


class FakeSupabaseClient:
    """In-memory stand-in for ``supabase.Client`` tables ``{id, data}``"""

    def __init__(self):
        self.tables = {}
        self.failing = set()
        self.calls = []
        self.auth = MagicMock()

    def table(self, name):
        return FakeQuery(self, name)

    def seed(self, table, records):
        rows = self.tables.setdefault(table, {})
        for record in records:
            rows[record["id"]] = {"id": record["id"], "data": copy.deepcopy(record)}

    def data(self, table):
        return [row["data"] for row in self.tables.get(table, {}).values()]


# =============================================================================
# MOCK FIXTURES
# =============================================================================

@pytest.fixture
def fake_st():
    """Streamlit stand-in to monkeypatch into a module's ``st`` name"""
    st = MagicMock()
    st.session_state = SessionState()
    return st


@pytest.fixture
def mock_supabase():
    """Mock Supabase client"""
    mock_client = MagicMock()
    mock_client.table.return_value.select.return_value.range.return_value.execute.return_value.data = []
    mock_client.table.return_value.upsert.return_value.execute.return_value = MagicMock()
    return mock_client


@pytest.fixture
def fake_supabase():
    return FakeSupabaseClient()


@pytest.fixture
def remote_factory(fake_supabase):
    """
    Replacement for ``RemoteStore.connect``: every store shares
    ``fake_supabase`` and runs no watcher threads.
    """
    from fabstock_core.storage import RemoteStore

    def factory(url, key, **kwargs):
        factory.calls.append((url, key))
        kwargs["autostart_watchers"] = False
        store = RemoteStore(fake_supabase, poll_interval=0.01, **kwargs)
        factory.stores.append(store)
        return store

    factory.calls = []
    factory.stores = []
    return factory


# =============================================================================
# STORAGE & PROVIDER FIXTURES
# =============================================================================

@pytest.fixture
def local_store(tmp_path):
    from fabstock_core.storage import LocalStore

    store = LocalStore(tmp_path / "fabstock.db")
    store.initialize()
    yield store
    store.close()


@pytest.fixture
def inline_executor():
    from fabstock_core.sync import InlineExecutor
    return InlineExecutor()


@pytest.fixture
def remote_settings():
    from fabstock_core.models import AppSettings, StorageMode
    return AppSettings(
        mode=StorageMode.REMOTE,
        remote_url="https://fablab.supabase.co",
        remote_key="anon-key",
    )


@pytest.fixture
def provider(local_store, remote_factory, inline_executor):
    """Initialized local-mode provider with the built-in dataset"""
    from fabstock_core.models import AppSettings
    from fabstock_core.sync import DataProvider

    provider = DataProvider(
        AppSettings(),
        local_store=local_store,
        remote_factory=remote_factory,
        executor=inline_executor,
    )
    provider.initialize()
    yield provider
    provider.teardown()


# =============================================================================
# TEAM FIXTURES
# =============================================================================

@pytest.fixture
def admin():
    from fabstock_core.models import MemberRole, TeamMember
    return TeamMember(id="u1", name="Fab Admin", email="admin@fablab.com",
                      role=MemberRole.ADMIN, can_manage_stock=True)


@pytest.fixture
def member():
    from fabstock_core.models import MemberRole, TeamMember
    return TeamMember(id="u2", name="Camille", email="camille@fablab.com",
                      role=MemberRole.MEMBER, can_manage_stock=True)


@pytest.fixture
def intern():
    from fabstock_core.models import MemberRole, TeamMember
    return TeamMember(id="u3", name="Léo", email="leo@fablab.com",
                      role=MemberRole.INTERN, can_manage_stock=False)
