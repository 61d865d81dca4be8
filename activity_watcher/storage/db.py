from __future__ import annotations

import sqlite3
import threading
from pathlib import Path

from ..models import WatchedItem, to_iso, from_iso


def open_db(path: Path) -> sqlite3.Connection:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # Worker threads share the connection; WatchStore serializes access.
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.row_factory = sqlite3.Row

    # Pragmas: safe defaults for a local bot store
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA busy_timeout=5000;")
    return conn


MIGRATIONS: list[str] = [
    # 1
    """
    CREATE TABLE IF NOT EXISTS schema_migrations (
      version INTEGER PRIMARY KEY,
      applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ','now'))
    );

    CREATE TABLE IF NOT EXISTS watched_items (
      url TEXT PRIMARY KEY,
      deadline TEXT NOT NULL,
      last_check TEXT NOT NULL,
      last_reminder TEXT,
      created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ','now'))
    );
    """,
]


def ensure_schema(conn: sqlite3.Connection) -> None:
    conn.execute("CREATE TABLE IF NOT EXISTS schema_migrations (version INTEGER PRIMARY KEY, applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ','now')))")
    cur = conn.execute("SELECT COALESCE(MAX(version), 0) AS v FROM schema_migrations")
    current = int(cur.fetchone()["v"])

    for idx, sql in enumerate(MIGRATIONS, start=1):
        if idx <= current:
            continue
        with conn:
            conn.executescript(sql)
            conn.execute("INSERT INTO schema_migrations(version) VALUES (?)", (idx,))


def _row_to_item(row: sqlite3.Row) -> WatchedItem:
    return WatchedItem(
        url=row["url"],
        deadline=from_iso(row["deadline"]),
        last_check=from_iso(row["last_check"]),
        last_reminder=from_iso(row["last_reminder"]) if row["last_reminder"] else None,
    )


class WatchStore:
    """One row per watched item, keyed by URL."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self._lock = threading.Lock()

    def list(self) -> list[WatchedItem]:
        with self._lock:
            rows = self.conn.execute(
                "SELECT url, deadline, last_check, last_reminder FROM watched_items ORDER BY created_at, url"
            ).fetchall()
        return [_row_to_item(r) for r in rows]

    def get(self, url: str) -> WatchedItem | None:
        with self._lock:
            row = self.conn.execute(
                "SELECT url, deadline, last_check, last_reminder FROM watched_items WHERE url=?",
                (url,),
            ).fetchone()
        return _row_to_item(row) if row else None

    def upsert(self, item: WatchedItem) -> None:
        last_reminder = to_iso(item.last_reminder) if item.last_reminder else None
        with self._lock, self.conn:
            self.conn.execute(
                "INSERT INTO watched_items(url, deadline, last_check, last_reminder) VALUES (?,?,?,?) "
                "ON CONFLICT(url) DO UPDATE SET deadline=excluded.deadline, last_check=excluded.last_check, "
                "last_reminder=excluded.last_reminder",
                (item.url, to_iso(item.deadline), to_iso(item.last_check), last_reminder),
            )

    def delete(self, url: str) -> bool:
        with self._lock, self.conn:
            cur = self.conn.execute("DELETE FROM watched_items WHERE url=?", (url,))
        return cur.rowcount > 0

    def __contains__(self, url: str) -> bool:
        return self.get(url) is not None

    def __len__(self) -> int:
        with self._lock:
            row = self.conn.execute("SELECT COUNT(*) AS n FROM watched_items").fetchone()
        return int(row["n"])


def open_store(path: Path) -> WatchStore:
    conn = open_db(path)
    ensure_schema(conn)
    return WatchStore(conn)
