"""Repository listing and registration of assigned issues."""
from __future__ import annotations

import logging

from .config import ConfigurationError
from .github import CollaboratorFetchError
from .models import WatchedItem

LOG = logging.getLogger(__name__)


def list_watched_repos(ctx) -> list[dict]:
    """Repositories of the configured owner, minus opted-out and archived ones."""
    owner = ctx.settings.owner
    if not owner:
        raise ConfigurationError("watch.owner is not configured")

    repos = []
    for repo in ctx.client.list_repos(owner):
        name = repo.get("name")
        if not name or name in ctx.settings.opt_out:
            continue
        if repo.get("archived"):
            continue
        repos.append(repo)
    return repos


def _skip_issue(issue: dict) -> bool:
    return bool(
        issue.get("draft")
        or issue.get("pull_request")
        or issue.get("locked")
        or issue.get("state") != "open"
    )


def register_assigned_issues(ctx, repo: dict) -> int:
    owner = (repo.get("owner") or {}).get("login") or ctx.settings.owner
    registered = 0

    for issue in ctx.client.list_open_issues(owner, repo["name"]):
        url = issue.get("html_url")
        if not url or _skip_issue(issue):
            LOG.debug("Skipping issue due to the issue state: %s", url)
            continue
        if not (issue.get("assignees") or issue.get("assignee")):
            LOG.debug("Skipping issue because no user is assigned: %s", url)
            continue
        if url in ctx.store:
            continue

        now = ctx.now()
        ctx.store.upsert(WatchedItem(url=url, deadline=now, last_check=now))
        LOG.info("Watching assigned issue: %s", url)
        registered += 1

    return registered


def watch_user_activity(ctx) -> int:
    """Register every assigned, unwatched open issue. Returns how many."""
    repos = list_watched_repos(ctx)
    if not repos:
        LOG.info("No watched repos have been found, no work to do.")
        return 0

    registered = 0
    for repo in repos:
        LOG.debug("> Watching user activity for repo: %s (%s)", repo["name"], repo.get("html_url"))
        try:
            registered += register_assigned_issues(ctx, repo)
        except CollaboratorFetchError as e:
            LOG.error("Could not list issues for %s: %s", repo["name"], e)
    return registered


def run(args) -> int:
    """Execute watch command."""
    from .context import build_context

    ctx = build_context()
    n = watch_user_activity(ctx)
    print(f"Registered {n} new watched items ({len(ctx.store)} total)")
    return 0
