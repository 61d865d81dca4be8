from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta, timezone
from pathlib import Path

from activity_watcher.models import WatchedItem
from activity_watcher.storage import db as dbmod

URL = "https://github.com/acme/widgets/issues/7"


def test_ensure_schema_creates_tables_and_is_rerunnable():
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row

    dbmod.ensure_schema(conn)
    dbmod.ensure_schema(conn)

    tables = {
        r["name"]
        for r in conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        ).fetchall()
    }
    assert "schema_migrations" in tables
    assert "watched_items" in tables
    versions = [r["version"] for r in conn.execute("SELECT version FROM schema_migrations")]
    assert versions == [1]


def test_round_trip_keeps_microseconds(store):
    deadline = datetime(2026, 3, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
    last_check = deadline + timedelta(microseconds=1)
    last_reminder = datetime(2026, 3, 2, 8, 30, 15, 999999, tzinfo=timezone(timedelta(hours=2)))
    item = WatchedItem(url=URL, deadline=deadline, last_check=last_check, last_reminder=last_reminder)

    store.upsert(item)
    loaded = store.get(URL)

    assert loaded == item
    assert loaded.deadline.microsecond == 123456
    assert loaded.last_reminder == last_reminder


def test_upsert_is_keyed_by_url(store):
    t0 = datetime(2026, 3, 1, tzinfo=timezone.utc)
    store.upsert(WatchedItem(url=URL, deadline=t0, last_check=t0, last_reminder=t0))
    store.upsert(WatchedItem(url=URL, deadline=t0 + timedelta(hours=1), last_check=t0 + timedelta(hours=1)))

    assert len(store) == 1
    loaded = store.get(URL)
    assert loaded.deadline == t0 + timedelta(hours=1)
    assert loaded.last_reminder is None


def test_delete_and_contains(store):
    t0 = datetime(2026, 3, 1, tzinfo=timezone.utc)
    store.upsert(WatchedItem(url=URL, deadline=t0, last_check=t0))

    assert URL in store
    assert store.delete(URL) is True
    assert URL not in store
    assert store.delete(URL) is False
    assert store.list() == []


def test_naive_instants_are_treated_as_utc(store):
    naive = datetime(2026, 3, 1, 12, 0)
    store.upsert(WatchedItem(url=URL, deadline=naive, last_check=naive))

    assert store.get(URL).deadline == naive.replace(tzinfo=timezone.utc)


def test_open_store_creates_parent_dirs(tmp_path: Path):
    path = tmp_path / "nested" / "watch.db"
    s = dbmod.open_store(path)

    assert path.exists()
    assert len(s) == 0
