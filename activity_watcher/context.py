from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from . import http
from .auth import get_token
from .config import Settings, load_settings
from .github import GitHubClient
from .models import utc_now
from .storage import WatchStore, open_store


@dataclass
class Context:
    """Everything a pass needs: settings, GitHub client, store and clock."""

    settings: Settings
    client: GitHubClient
    store: WatchStore
    clock: Callable[[], datetime] = field(default=utc_now)

    def now(self) -> datetime:
        return self.clock()


def build_context(settings: Settings | None = None) -> Context:
    if settings is None:
        settings = load_settings()
    http.configure(settings.calls_per_minute)
    client = GitHubClient(get_token(), api_url=settings.api_url, timeout=settings.timeout)
    return Context(settings=settings, client=client, store=open_store(settings.store_path))
