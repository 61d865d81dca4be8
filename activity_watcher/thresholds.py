"""Deadline arithmetic for reminders and disqualification.

A threshold is a number of minutes past an item's deadline. Zero means the
corresponding action is disabled: it never fires, however much time passed.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

ACTIVE = "active"
REMINDER_DUE = "reminder_due"
REMINDER_SENT = "reminder_sent"
DISQUALIFIED = "disqualified"


@dataclass(frozen=True)
class Thresholds:
    reminder_minutes: float
    disqualify_minutes: float

    @property
    def reminders_enabled(self) -> bool:
        return self.reminder_minutes > 0

    @property
    def disqualification_enabled(self) -> bool:
        return self.disqualify_minutes > 0


def reminder_instant(deadline: datetime, thresholds: Thresholds) -> datetime | None:
    if not thresholds.reminders_enabled:
        return None
    return deadline + timedelta(minutes=thresholds.reminder_minutes)


def disqualify_instant(deadline: datetime, thresholds: Thresholds) -> datetime | None:
    if not thresholds.disqualification_enabled:
        return None
    return deadline + timedelta(minutes=thresholds.disqualify_minutes)


def reminder_due(now: datetime, deadline: datetime, thresholds: Thresholds) -> bool:
    instant = reminder_instant(deadline, thresholds)
    return instant is not None and now >= instant


def disqualification_due(now: datetime, deadline: datetime, thresholds: Thresholds) -> bool:
    instant = disqualify_instant(deadline, thresholds)
    return instant is not None and now >= instant


def item_state(item, now: datetime, thresholds: Thresholds) -> str:
    """Derive the lifecycle state of a watched item from its timestamps."""
    if disqualification_due(now, item.deadline, thresholds):
        return DISQUALIFIED
    if item.last_reminder is not None:
        return REMINDER_SENT
    if reminder_due(now, item.deadline, thresholds):
        return REMINDER_DUE
    return ACTIVE


def format_minutes(minutes: float) -> str:
    """Render a threshold for humans ("disabled", "45 minutes", "1.5 hours", "3.5 days")."""
    if minutes <= 0:
        return "disabled"
    for unit, size in (("days", 1440), ("hours", 60)):
        if minutes >= size and (minutes / size) * 2 == int((minutes / size) * 2):
            value = minutes / size
            return f"{value:g} {unit}"
    return f"{minutes:g} minutes"
