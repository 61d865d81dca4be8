"""Driver pass over every watched item."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from .engine import NO_ASSIGNEES, Action, evaluate_item
from .github import CollaboratorFetchError

LOG = logging.getLogger(__name__)


@dataclass
class PassSummary:
    total: int = 0
    extended: int = 0
    reminded: int = 0
    unassigned: int = 0
    unchanged: int = 0
    no_assignees: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)

    def record(self, outcome: str) -> None:
        if outcome == Action.EXTEND:
            self.extended += 1
        elif outcome == Action.REMIND:
            self.reminded += 1
        elif outcome == Action.UNASSIGN:
            self.unassigned += 1
        elif outcome == NO_ASSIGNEES:
            self.no_assignees += 1
        else:
            self.unchanged += 1

    def __bool__(self) -> bool:
        # True when there were watched items to process
        return self.total > 0


def update_tasks(ctx) -> PassSummary:
    """Evaluate all watched items, one future per item.

    A failing item is logged and counted; it never aborts its siblings.
    """
    summary = PassSummary()
    items = ctx.store.list()

    if not items:
        LOG.info("No watched items have been found, no work to do.")
        return summary

    summary.total = len(items)
    workers = max(1, min(ctx.settings.workers, len(items)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="watch") as pool:
        futures = {pool.submit(evaluate_item, ctx, item): item for item in items}
        for fut in as_completed(futures):
            item = futures[fut]
            try:
                outcome = fut.result()
            except CollaboratorFetchError as e:
                LOG.error("Could not evaluate %s: %s", item.url, e)
                summary.errors.append((item.url, str(e)))
                continue
            except Exception as e:
                LOG.exception("Unexpected error while evaluating %s", item.url)
                summary.errors.append((item.url, f"{type(e).__name__}: {e}"))
                continue
            summary.record(outcome)

    return summary


def run(args) -> int:
    """Execute run command."""
    from .context import build_context

    ctx = build_context()
    summary = update_tasks(ctx)

    if not summary:
        print("No watched items, nothing to do.")
        return 0

    print(
        f"Evaluated {summary.total} items: {summary.extended} extended, "
        f"{summary.reminded} reminded, {summary.unassigned} unassigned, "
        f"{summary.unchanged} unchanged"
    )
    if summary.no_assignees:
        print(f"  {summary.no_assignees} without assignees (left for next pass)")
    for url, error in summary.errors:
        print(f"  ✗ {url}: {error}")
    return 1 if summary.errors else 0
