"""Side effects on GitHub: reminder comments and unassignment."""
from __future__ import annotations

import logging

from .github import parse_github_url
from .models import WatchedItem

LOG = logging.getLogger(__name__)

REMINDER_TEXT = "this task has been idle for a while. Please provide an update."


class NoAssigneesError(RuntimeError):
    """Raised when a watched issue has nobody assigned to act upon."""


def _resolve_assignees(client, item: WatchedItem, assignees: list[str] | None) -> list[str]:
    # callers that already resolved the assignees pass them in
    if assignees is None:
        assignees = client.get_assignees(parse_github_url(item.url))
    if not assignees:
        raise NoAssigneesError(f"Missing Assignees from {item.url}")
    return list(assignees)


def format_reminder(assignees: list[str]) -> str:
    mentions = ", ".join(f"@{login}" for login in assignees)
    return f"{mentions}, {REMINDER_TEXT}"


def remind_assignees(client, item: WatchedItem, assignees: list[str] | None = None) -> list[str]:
    """Post a single comment mentioning every assignee. Returns the logins."""
    assignees = _resolve_assignees(client, item, assignees)
    client.create_comment(parse_github_url(item.url), format_reminder(assignees))
    LOG.info("Reminded %s on %s", ", ".join(assignees), item.url)
    return assignees


def remove_idle_assignees(client, item: WatchedItem, assignees: list[str] | None = None) -> list[str]:
    """Remove every assignee from the issue. Returns the removed logins."""
    assignees = _resolve_assignees(client, item, assignees)
    client.remove_assignees(parse_github_url(item.url), assignees)
    LOG.info("Removed %s from %s", ", ".join(assignees), item.url)
    return assignees
