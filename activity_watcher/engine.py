"""Deadline state machine for watched issues.

Each pass re-derives an item's state from its timestamps; nothing but the
timestamps is persisted. The order of checks is fixed:

1. assignee activity since the last check pushes the deadline forward by the
   time elapsed since that check, and starts a new reminder cycle;
2. otherwise, past the disqualification threshold, assignees are removed and
   the item stops being watched;
3. otherwise, past the reminder threshold and with no reminder sent in this
   cycle, a reminder is posted;
4. otherwise nothing is written.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum

from .actions import NoAssigneesError, remind_assignees, remove_idle_assignees
from .activity import has_activity
from .github import parse_github_url
from .models import WatchedItem
from .thresholds import (
    Thresholds,
    disqualification_due,
    disqualify_instant,
    format_minutes,
    reminder_due,
    reminder_instant,
)

LOG = logging.getLogger(__name__)

# Outcome of evaluate_item when an executor found nobody assigned
NO_ASSIGNEES = "no_assignees"


class Action(str, Enum):
    EXTEND = "extend"
    UNASSIGN = "unassign"
    REMIND = "remind"
    NOOP = "noop"


@dataclass(frozen=True)
class Decision:
    action: Action
    # Record to persist once the action succeeded (None: nothing to write)
    item: WatchedItem | None = None


def decide(item: WatchedItem, now: datetime, thresholds: Thresholds, active: bool) -> Decision:
    if active:
        elapsed = max(now - item.last_check, timedelta(0))
        return Decision(
            Action.EXTEND,
            replace(
                item,
                deadline=item.deadline + elapsed,
                last_check=max(now, item.last_check),
                last_reminder=None,
            ),
        )

    if disqualification_due(now, item.deadline, thresholds):
        return Decision(Action.UNASSIGN)

    if item.last_reminder is None and reminder_due(now, item.deadline, thresholds):
        return Decision(
            Action.REMIND,
            replace(item, last_reminder=now, last_check=max(now, item.last_check)),
        )

    return Decision(Action.NOOP)


def _fmt(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M UTC") if value else "disabled"


def evaluate_item(ctx, item: WatchedItem) -> str:
    """Run one watched item through fetch, decision, action and persistence.

    Returns the Action taken, or NO_ASSIGNEES when the executor had nobody to
    act upon. Fetch errors propagate without any write.
    """
    settings = ctx.settings
    now = ctx.now()
    assignees = ctx.client.get_assignees(parse_github_url(item.url))
    active = has_activity(ctx.client, item, assignees, whitelist=settings.event_whitelist)
    decision = decide(item, now, settings.thresholds, active)

    if decision.action is Action.EXTEND:
        LOG.info(
            "Activity found on %s, will move the deadline forward from %s to %s",
            item.url, _fmt(item.deadline), _fmt(decision.item.deadline),
        )
        ctx.store.upsert(decision.item)

    elif decision.action is Action.UNASSIGN:
        LOG.info("Passed the deadline on %s and no activity is detected, removing assignees.", item.url)
        try:
            remove_idle_assignees(ctx.client, item, assignees)
        except NoAssigneesError as e:
            LOG.warning("%s", e)
            return NO_ASSIGNEES
        ctx.store.delete(item.url)

    elif decision.action is Action.REMIND:
        LOG.info("We are past the deadline on %s, sending a reminder.", item.url)
        try:
            remind_assignees(ctx.client, item, assignees)
        except NoAssigneesError as e:
            LOG.warning("%s", e)
            return NO_ASSIGNEES
        ctx.store.upsert(decision.item)

    else:
        LOG.info(
            "Nothing to do for %s, still within due-time (now: %s, reminder: %s [%s], disqualification: %s [%s])",
            item.url,
            _fmt(now),
            _fmt(reminder_instant(item.deadline, settings.thresholds)),
            format_minutes(settings.thresholds.reminder_minutes),
            _fmt(disqualify_instant(item.deadline, settings.thresholds)),
            format_minutes(settings.thresholds.disqualify_minutes),
        )

    return decision.action
