"""List and forget watched items."""
from __future__ import annotations

import json

from .config import load_settings
from .models import utc_now
from .storage import open_store
from .thresholds import disqualify_instant, item_state, reminder_instant


def describe_items(store, thresholds, now=None) -> list[dict]:
    now = now or utc_now()
    out = []
    for item in store.list():
        d = item.to_dict()
        d["state"] = item_state(item, now, thresholds)
        reminder_at = reminder_instant(item.deadline, thresholds)
        disqualify_at = disqualify_instant(item.deadline, thresholds)
        d["reminder_at"] = reminder_at.isoformat() if reminder_at else None
        d["disqualify_at"] = disqualify_at.isoformat() if disqualify_at else None
        out.append(d)
    return out


def run_list(args) -> int:
    """Execute list command."""
    settings = load_settings()
    store = open_store(settings.store_path)
    items = describe_items(store, settings.thresholds)

    if args.json:
        print(json.dumps({"items": items}, indent=2))
        return 0

    if not items:
        print("No watched items.")
        return 0

    for d in items:
        print(f"{d['state']:<14} {d['url']}")
        print(f"               deadline {d['deadline']}  last check {d['last_check']}")
        if d["last_reminder"]:
            print(f"               reminded {d['last_reminder']}")
    return 0


def run_forget(args) -> int:
    """Execute forget command."""
    settings = load_settings()
    store = open_store(settings.store_path)
    if store.delete(args.url):
        print(f"Forgot {args.url}")
        return 0
    print(f"Not watched: {args.url}")
    return 1
