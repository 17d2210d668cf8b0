"""Repository adapter tests.

Tests:
  1. EdgeDB  — each operation issues one query with the right arguments and
               maps result objects to plain values
  2. EdgeDB  — client failures surface as StoreUnavailable
  3. Memory  — cascading deletes and owner scoping match the EdgeDB schema
  4. Factory — backend selection from config

Run: pytest test_repository.py
"""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import edgedb
import pytest

from tte.errors import StoreUnavailable, TrackerError
from tte.repository import create_repository
from tte.repository.edge import EdgeDBRepository
from tte.repository.memory import MemoryRepository

USER = uuid.uuid4()


class FakeClient:
    """Records (method, query, args) and replays queued results."""

    def __init__(self, *results):
        self.calls = []
        self.results = list(results)

    def _call(self, method, query, *args):
        self.calls.append((method, query, args))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    def query(self, query, *args):
        return self._call("query", query, *args)

    def query_single(self, query, *args):
        return self._call("query_single", query, *args)

    def query_required_single(self, query, *args):
        return self._call("query_required_single", query, *args)


# ── EdgeDB adapter ───────────────────────────────────────────────────────────

def test_find_user_by_secret():
    client = FakeClient(SimpleNamespace(id=USER), None)
    repo = EdgeDBRepository(client)

    assert repo.find_user_by_secret("hunter2") == USER
    assert repo.find_user_by_secret("unknown") is None
    method, query, args = client.calls[0]
    assert method == "query_single"
    assert ".password = <str>$0" in query
    assert args == ("hunter2",)


def test_create_user_and_exists():
    client = FakeClient(SimpleNamespace(id=USER), True)
    repo = EdgeDBRepository(client)

    assert repo.create_user("hunter2") == USER
    assert repo.user_exists(USER) is True
    assert "INSERT User" in client.calls[0][1]
    assert client.calls[1][2] == (USER,)


def test_list_projects_maps_rows():
    pid = uuid.uuid4()
    client = FakeClient([SimpleNamespace(id=pid, name="Work", is_default=True)])
    repo = EdgeDBRepository(client)

    assert repo.list_projects(USER) == [{"id": pid, "name": "Work", "is_default": True}]
    assert ".owner.id = <uuid>$0" in client.calls[0][1]


def test_find_projects_for_start_by_name_and_default():
    client = FakeClient([], [])
    repo = EdgeDBRepository(client)

    repo.find_projects_for_start(USER, "Work")
    repo.find_projects_for_start(USER)
    by_name, by_default = client.calls
    assert by_name[2] == (USER, "Work")
    assert ".name = <str>$1" in by_name[1]
    assert by_default[2] == (USER,)
    assert ".<default_project[IS User]" in by_default[1]


def test_project_mutations():
    client = FakeClient(SimpleNamespace(id=uuid.uuid4()), 2, 1, 0)
    repo = EdgeDBRepository(client)

    repo.create_project(USER, "Work")
    assert repo.delete_projects_by_name(USER, "Work") == 2
    assert repo.set_default_project(USER, "Work") is True
    assert repo.set_default_project(USER, "Nope") is False
    assert client.calls[0][2] == ("Work", USER)
    assert "DELETE Project" in client.calls[1][1]


def test_entry_queries_use_server_time():
    eid = uuid.uuid4()
    pid = uuid.uuid4()
    start = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
    row = SimpleNamespace(
        id=eid, start_at=start, stop_at=None,
        duration=timedelta(seconds=5), project_name="Work",
    )
    client = FakeClient(3, SimpleNamespace(id=eid), [row])
    repo = EdgeDBRepository(client)

    assert repo.stop_all_active(USER) == 3
    assert repo.create_entry(USER, pid) == eid
    assert repo.list_entries(USER) == [{
        "id": eid, "start_at": start, "stop_at": None,
        "duration": timedelta(seconds=5), "project_name": "Work",
    }]
    for _, query, _ in client.calls:
        assert "datetime_of_statement()" in query
    assert client.calls[1][2] == (USER, pid)


def test_client_errors_become_store_unavailable():
    client = FakeClient(edgedb.InterfaceError("connection lost"))
    repo = EdgeDBRepository(client)

    with pytest.raises(StoreUnavailable):
        repo.user_exists(USER)


# ── Memory adapter ───────────────────────────────────────────────────────────

def test_memory_delete_project_drops_entries_and_default():
    repo = MemoryRepository()
    user = repo.create_user("s")
    pid = repo.create_project(user, "Work")
    repo.set_default_project(user, "Work")
    repo.create_entry(user, pid)

    assert repo.delete_projects_by_name(user, "Work") == 1
    assert repo.list_entries(user) == []
    assert repo.find_projects_for_start(user) == []


def test_memory_rejects_entry_on_foreign_project():
    repo = MemoryRepository()
    owner = repo.create_user("a")
    other = repo.create_user("b")
    pid = repo.create_project(owner, "Work")

    with pytest.raises(ValueError):
        repo.create_entry(other, pid)


def test_memory_list_projects_sorted_by_name():
    repo = MemoryRepository()
    user = repo.create_user("s")
    for name in ("b", "a", "c"):
        repo.create_project(user, name)
    assert [p["name"] for p in repo.list_projects(user)] == ["a", "b", "c"]


# ── Factory ──────────────────────────────────────────────────────────────────

def test_factory_rejects_memory_backend():
    # An in-process store would forget the user between commands.
    with pytest.raises(TrackerError, match="Unknown store backend"):
        create_repository({"store_backend": "memory"})


def test_factory_unknown_backend():
    with pytest.raises(TrackerError, match="Unknown store backend"):
        create_repository({"store_backend": "sqlite"})


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__]))
