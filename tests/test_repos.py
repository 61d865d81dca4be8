from __future__ import annotations

from datetime import timedelta

import pytest

from activity_watcher import repos
from activity_watcher.config import ConfigurationError
from activity_watcher.github import CollaboratorFetchError
from activity_watcher.models import WatchedItem

from conftest import D


def _issue(n, repo="widgets", **kw):
    issue = {
        "html_url": f"https://github.com/acme/{repo}/issues/{n}",
        "state": "open",
        "assignees": [{"login": "alice"}],
    }
    issue.update(kw)
    return issue


@pytest.fixture
def listing(github):
    github.repos = [
        {"name": "widgets", "owner": {"login": "acme"}},
        {"name": "sandbox", "owner": {"login": "acme"}},
        {"name": "old", "owner": {"login": "acme"}, "archived": True},
        {"name": "gadgets", "owner": {"login": "acme"}},
    ]
    github.issues = {
        "widgets": [
            _issue(1),
            _issue(2, assignees=[]),
            _issue(3, pull_request={"url": "x"}),
            _issue(4, locked=True),
            _issue(5),
        ],
        "gadgets": [_issue(9, repo="gadgets", assignees=[], assignee={"login": "bob"})],
        "sandbox": [_issue(1, repo="sandbox")],
    }
    github.list_repos = lambda owner: list(github.repos)
    github.list_open_issues = lambda owner, name: iter(github.issues.get(name, []))
    return github


def test_opt_out_and_archived_repos_are_skipped(make_ctx, listing):
    ctx = make_ctx(watch={"owner": "acme", "opt_out": ["sandbox"]})
    assert [r["name"] for r in repos.list_watched_repos(ctx)] == ["widgets", "gadgets"]


def test_missing_owner_is_a_configuration_error(make_ctx, listing):
    with pytest.raises(ConfigurationError):
        repos.list_watched_repos(make_ctx(watch={"owner": ""}))


def test_registers_assigned_open_issues_once(make_ctx, store, listing):
    ctx = make_ctx(now=D, watch={"owner": "acme", "opt_out": ["sandbox"]})

    assert repos.watch_user_activity(ctx) == 3
    urls = {item.url for item in store.list()}
    assert urls == {
        "https://github.com/acme/widgets/issues/1",
        "https://github.com/acme/widgets/issues/5",
        "https://github.com/acme/gadgets/issues/9",
    }
    item = store.get("https://github.com/acme/widgets/issues/1")
    assert item.deadline == D
    assert item.last_check == D
    assert item.last_reminder is None

    # second scan registers nothing new
    assert repos.watch_user_activity(ctx) == 0


def test_existing_records_are_not_reset(make_ctx, store, listing):
    url = "https://github.com/acme/widgets/issues/1"
    earlier = WatchedItem(url=url, deadline=D, last_check=D, last_reminder=D)
    store.upsert(earlier)

    repos.watch_user_activity(make_ctx(now=D + timedelta(days=1), watch={"owner": "acme", "opt_out": ["sandbox"]}))

    assert store.get(url) == earlier


def test_failing_repo_does_not_stop_the_scan(make_ctx, store, listing):
    def list_open_issues(owner, name):
        if name == "widgets":
            raise CollaboratorFetchError("HTTP 500")
        return iter(listing.issues.get(name, []))

    listing.list_open_issues = list_open_issues

    assert repos.watch_user_activity(make_ctx(watch={"owner": "acme", "opt_out": ["sandbox"]})) == 1
