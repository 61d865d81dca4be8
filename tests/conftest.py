"""Pytest configuration and fixtures."""
import sqlite3
from datetime import datetime, timezone

import pytest

from activity_watcher.config import DEFAULT_CONFIG, load_settings, _deep_merge
from activity_watcher.context import Context
from activity_watcher.github import CollaboratorFetchError, parse_github_url
from activity_watcher.storage import WatchStore, ensure_schema

ISSUE_URL = "https://github.com/acme/widgets/issues/7"
D = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeGitHub:
    """In-memory stand-in for GitHubClient keyed by issue URL."""

    def __init__(self):
        self.assignees: dict[str, list[str]] = {}
        self.timelines: dict[str, list[dict]] = {}
        self.broken: set[str] = set()
        self.comments: list[tuple[str, str]] = []
        self.removed: list[tuple[str, list[str]]] = []
        self.timeline_reads = 0
        self.assignee_reads = 0

    @staticmethod
    def _url(ref):
        return f"https://github.com/{ref.owner}/{ref.repo}/issues/{ref.number}"

    def get_assignees(self, ref):
        self.assignee_reads += 1
        url = self._url(ref)
        if url in self.broken:
            raise CollaboratorFetchError(f"GET {url} failed: HTTP 502")
        return list(self.assignees.get(url, []))

    def iter_timeline(self, ref):
        for ev in self.timelines.get(self._url(ref), []):
            self.timeline_reads += 1
            yield ev

    def create_comment(self, ref, body):
        self.comments.append((self._url(ref), body))
        return {"id": len(self.comments)}

    def remove_assignees(self, ref, assignees):
        self.removed.append((self._url(ref), list(assignees)))
        self.assignees[self._url(ref)] = []
        return {}


@pytest.fixture
def store():
    conn = sqlite3.connect(":memory:", check_same_thread=False)
    conn.row_factory = sqlite3.Row
    ensure_schema(conn)
    return WatchStore(conn)


@pytest.fixture
def github():
    return FakeGitHub()


@pytest.fixture
def make_ctx(store, github):
    """Build a Context around the fake client, with a fixed clock."""

    def _make(now=D, **overrides):
        config = _deep_merge(
            DEFAULT_CONFIG,
            {"warning": 60, "disqualification": 120, "watch": {"owner": "acme"}},
        )
        config = _deep_merge(config, overrides)
        return Context(settings=load_settings(config), client=github, store=store, clock=lambda: now)

    return _make


def comment(login: str, at: datetime, event: str = "commented") -> dict:
    return {"event": event, "actor": {"login": login}, "created_at": at.isoformat().replace("+00:00", "Z")}


def ref(url: str = ISSUE_URL):
    return parse_github_url(url)
