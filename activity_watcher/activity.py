"""Assignee activity on a watched issue, read from the GitHub timeline."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Iterator

from .github import parse_github_url
from .models import WatchedItem, from_iso


@dataclass(frozen=True)
class ActivityEvent:
    actor: str
    timestamp: datetime
    event: str


def _event_actor(raw: dict) -> str | None:
    for key in ("actor", "user", "author"):
        who = raw.get(key)
        if isinstance(who, dict) and who.get("login"):
            return who["login"]
    return None


def _event_time(raw: dict) -> datetime | None:
    for key in ("created_at", "submitted_at", "updated_at"):
        if raw.get(key):
            return from_iso(raw[key])
    # committed events carry their date on the git identities
    for key in ("committer", "author"):
        who = raw.get(key)
        if isinstance(who, dict) and who.get("date"):
            return from_iso(who["date"])
    return None


def parse_event(raw: dict) -> ActivityEvent | None:
    actor = _event_actor(raw)
    timestamp = _event_time(raw)
    if not actor or timestamp is None:
        return None
    return ActivityEvent(actor=actor, timestamp=timestamp, event=raw.get("event") or "")


def fetch_activity(
    client,
    item: WatchedItem,
    assignees: Iterable[str],
    *,
    whitelist: Iterable[str] | None = None,
) -> Iterator[ActivityEvent]:
    """Yield timeline events by current assignees at or after item.last_check.

    Pages are requested lazily, so a caller that stops after the first event
    does not walk the whole timeline. A whitelist limits the timeline event
    types that count; an empty one means nothing counts, None means everything.
    """
    wanted = {a.lower() for a in assignees}
    if not wanted:
        return
    allowed = set(whitelist) if whitelist is not None else None
    if allowed is not None and not allowed:
        return

    for raw in client.iter_timeline(parse_github_url(item.url)):
        if allowed is not None and raw.get("event") not in allowed:
            continue
        ev = parse_event(raw)
        if ev is None:
            continue
        if ev.actor.lower() in wanted and ev.timestamp >= item.last_check:
            yield ev


def has_activity(client, item: WatchedItem, assignees: Iterable[str], *, whitelist: Iterable[str] | None = None) -> bool:
    return next(fetch_activity(client, item, assignees, whitelist=whitelist), None) is not None
