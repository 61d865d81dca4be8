from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Serialize an instant as UTC ISO-8601 keeping microseconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_iso(value: str) -> datetime:
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class WatchedItem:
    """One assigned issue under deadline tracking, keyed by its URL."""

    url: str
    deadline: datetime
    last_check: datetime
    last_reminder: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "deadline": to_iso(self.deadline),
            "last_check": to_iso(self.last_check),
            "last_reminder": to_iso(self.last_reminder) if self.last_reminder else None,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "WatchedItem":
        last_reminder = d.get("last_reminder")
        return cls(
            url=d["url"],
            deadline=from_iso(d["deadline"]),
            last_check=from_iso(d["last_check"]),
            last_reminder=from_iso(last_reminder) if last_reminder else None,
        )
