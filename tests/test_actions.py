from __future__ import annotations

import pytest

from activity_watcher.actions import (
    NoAssigneesError,
    format_reminder,
    remind_assignees,
    remove_idle_assignees,
)
from activity_watcher.models import WatchedItem

from conftest import D, ISSUE_URL

ITEM = WatchedItem(url=ISSUE_URL, deadline=D, last_check=D)


def test_reminder_mentions_every_assignee():
    assert format_reminder(["alice", "bob"]) == (
        "@alice, @bob, this task has been idle for a while. Please provide an update."
    )


def test_remind_posts_a_single_comment(github):
    github.assignees[ISSUE_URL] = ["alice", "bob"]

    assert remind_assignees(github, ITEM) == ["alice", "bob"]
    assert len(github.comments) == 1
    assert github.comments[0][1].startswith("@alice, @bob,")


def test_remove_idle_assignees_removes_all(github):
    github.assignees[ISSUE_URL] = ["alice", "bob"]

    remove_idle_assignees(github, ITEM)

    assert github.removed == [(ISSUE_URL, ["alice", "bob"])]


@pytest.mark.parametrize("action", [remind_assignees, remove_idle_assignees])
def test_executors_refuse_without_assignees(github, action):
    with pytest.raises(NoAssigneesError):
        action(github, ITEM)
    assert github.comments == []
    assert github.removed == []


def test_executors_use_resolved_assignees(github):
    # nobody assigned according to the API: the caller's list wins
    remind_assignees(github, ITEM, ["alice"])
    remove_idle_assignees(github, ITEM, ["alice"])

    assert github.assignee_reads == 0
    assert github.comments[0][1].startswith("@alice,")
    assert github.removed == [(ISSUE_URL, ["alice"])]
