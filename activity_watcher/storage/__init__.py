"""SQLite storage for watched items.

One row per watched item, keyed by URL. Instants are stored as UTC
ISO-8601 strings with microseconds so a reload yields identical values.
"""

from .db import open_db, ensure_schema, open_store, WatchStore  # noqa: F401
