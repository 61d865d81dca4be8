"""Configuration management for activity-watcher.

Loads settings from ~/.config/activity-watcher/config.yaml with sensible defaults.
All settings are optional - defaults work out of the box.
"""
from __future__ import annotations

import copy
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .thresholds import Thresholds, format_minutes

# ============================================================================
# DEFAULTS
# ============================================================================

EVENT_WHITELIST = [
    "pull_request.review_requested",
    "pull_request.ready_for_review",
    "pull_request_review_comment.created",
    "issue_comment.created",
]

# Webhook event name -> issue timeline event. "push" is accepted but not on by
# default: timeline "committed" entries carry git identities, not GitHub logins.
TIMELINE_EVENTS = {
    "pull_request.review_requested": "review_requested",
    "pull_request.ready_for_review": "ready_for_review",
    "pull_request_review_comment.created": "commented",
    "issue_comment.created": "commented",
    "push": "committed",
}

DEFAULT_CONFIG = {
    # Delay past the deadline before a reminder is posted. 0 disables reminders.
    "warning": "3.5 days",

    # Delay past the deadline before assignees are removed. 0 disables it.
    "disqualification": "7 days",

    # Repository selection
    "watch": {
        "owner": "",                   # Organization (or user) to scan
        "opt_out": [],                 # Repository names to skip
    },

    # Events that count as activity on a task
    "event_whitelist": list(EVENT_WHITELIST),

    # API behavior
    "api": {
        "url": "https://api.github.com",
        "calls_per_minute": 60,        # Client-side request cap for the GitHub API
        "timeout": 20,
    },

    # Watch store
    "store": {
        "path": "~/.activity-watcher/watch.db",
    },

    # Items evaluated in parallel during a pass
    "workers": 4,
}

# Config file locations (first found wins)
CONFIG_PATHS = [
    Path.home() / ".config/activity-watcher/config.yaml",
    Path.home() / ".config/activity-watcher/config.yml",
    Path.home() / ".activity-watcher.yaml",
    Path("./activity-watcher.yaml"),
]


class ConfigurationError(ValueError):
    """Raised when a configured value cannot be interpreted."""


# ============================================================================
# CONFIG LOADING
# ============================================================================

_config_cache: dict | None = None


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base, returning new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def find_config_file() -> Path | None:
    """Find the first existing config file."""
    for path in CONFIG_PATHS:
        if path.exists():
            return path
    return None


def load_config(reload: bool = False) -> dict:
    """Load configuration with defaults.

    Returns merged config: defaults + user overrides.
    Config is cached after first load.
    """
    global _config_cache

    if _config_cache is not None and not reload:
        return _config_cache

    config = copy.deepcopy(DEFAULT_CONFIG)

    config_file = find_config_file()
    if config_file:
        try:
            user_config = yaml.safe_load(config_file.read_text()) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Could not load config from {config_file}: {e}") from e
        if not isinstance(user_config, dict):
            raise ConfigurationError(f"Config file {config_file} must contain a mapping")
        config = _deep_merge(config, user_config)

    _config_cache = config
    return config


def get(key: str, default: Any = None) -> Any:
    """Get a config value by dot-separated key.

    Example:
        get("api.calls_per_minute")  # Returns 60
        get("watch.opt_out")         # Returns list of repository names
    """
    config = load_config()
    parts = key.split(".")
    value = config
    for part in parts:
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return default
    return value


# ============================================================================
# PARSING
# ============================================================================

_UNIT_MINUTES = {
    "m": 1, "min": 1, "mins": 1, "minute": 1, "minutes": 1,
    "h": 60, "hr": 60, "hrs": 60, "hour": 60, "hours": 60,
    "d": 1440, "day": 1440, "days": 1440,
    "w": 10080, "week": 10080, "weeks": 10080,
}

_DURATION_RE = re.compile(r"^\s*(\d+(?:[.,]\d+)?)\s*([a-z]*)\s*$", re.IGNORECASE)


def parse_duration(value: Any) -> float:
    """Parse a threshold into minutes.

    Plain numbers are minutes. Strings carry a unit: "90m", "2 hours",
    "3.5 days", "1w". "1,5 days" is accepted as well.
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid threshold value: [{value}]")
    if isinstance(value, (int, float)):
        minutes = float(value)
    elif isinstance(value, str):
        m = _DURATION_RE.match(value)
        if not m:
            raise ConfigurationError(f"Invalid threshold value: [{value}]")
        amount = float(m.group(1).replace(",", "."))
        unit = m.group(2).lower() or "m"
        if unit not in _UNIT_MINUTES:
            raise ConfigurationError(f"Invalid threshold unit in: [{value}]")
        minutes = amount * _UNIT_MINUTES[unit]
    else:
        raise ConfigurationError(f"Invalid threshold value: [{value}]")

    if minutes < 0:
        raise ConfigurationError(f"Threshold must not be negative: [{value}]")
    return minutes


def parse_event_whitelist(events: Any) -> frozenset[str]:
    """Map configured webhook event names to timeline event types."""
    if not isinstance(events, (list, tuple)):
        raise ConfigurationError("event_whitelist must be a list of event names")
    out: set[str] = set()
    for event in events:
        if event not in TIMELINE_EVENTS:
            raise ConfigurationError(f"Invalid event [{event}]")
        out.add(TIMELINE_EVENTS[event])
    return frozenset(out)


@dataclass(frozen=True)
class Settings:
    thresholds: Thresholds
    owner: str
    opt_out: frozenset[str]
    event_whitelist: frozenset[str]
    api_url: str
    calls_per_minute: int
    timeout: float
    store_path: Path
    workers: int


def load_settings(config: dict | None = None) -> Settings:
    """Validate the merged config into Settings.

    Fails fast with ConfigurationError before any watched item is evaluated.
    """
    if config is None:
        config = load_config()

    thresholds = Thresholds(
        reminder_minutes=parse_duration(config.get("warning", 0)),
        disqualify_minutes=parse_duration(config.get("disqualification", 0)),
    )

    watch = config.get("watch") or {}
    opt_out = watch.get("opt_out") or []
    if not isinstance(opt_out, (list, tuple)):
        raise ConfigurationError("watch.opt_out must be a list of repository names")

    api = config.get("api") or {}
    try:
        calls_per_minute = int(api.get("calls_per_minute", 60))
        timeout = float(api.get("timeout", 20))
        workers = int(config.get("workers", 4))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid numeric setting: {e}") from e
    if workers < 1:
        raise ConfigurationError("workers must be >= 1")

    store = config.get("store") or {}

    return Settings(
        thresholds=thresholds,
        owner=str(watch.get("owner") or ""),
        opt_out=frozenset(str(r) for r in opt_out),
        event_whitelist=parse_event_whitelist(config.get("event_whitelist", EVENT_WHITELIST)),
        api_url=str(api.get("url") or "https://api.github.com").rstrip("/"),
        calls_per_minute=calls_per_minute,
        timeout=timeout,
        store_path=Path(str(store.get("path") or DEFAULT_CONFIG["store"]["path"])).expanduser(),
        workers=workers,
    )


# ============================================================================
# CLI HELPER
# ============================================================================

def init_config(force: bool = False) -> Path:
    """Create example config file in default location."""
    config_path = CONFIG_PATHS[0]

    if config_path.exists() and not force:
        raise FileExistsError(f"Config already exists: {config_path}")

    config_path.parent.mkdir(parents=True, exist_ok=True)

    example = """# activity-watcher configuration
# All settings are optional - defaults work out of the box.

# Delay after the deadline before reminding assignees (0 disables)
warning: 3.5 days

# Delay after the deadline before unassigning idle assignees (0 disables)
disqualification: 7 days

# Repositories to watch
watch:
  owner: my-org                  # Organization or user to scan
  opt_out:                       # Repository names to skip
    - sandbox

# Events that count as activity
event_whitelist:
  - pull_request.review_requested
  - pull_request.ready_for_review
  - pull_request_review_comment.created
  - issue_comment.created
  # - push                       # commits rarely carry a GitHub login

# API settings
api:
  url: https://api.github.com
  calls_per_minute: 60           # Client-side API cap (logs when throttled)

# Where watched items are stored
store:
  path: ~/.activity-watcher/watch.db

# Items evaluated in parallel during a pass
workers: 4
"""

    config_path.write_text(example)
    return config_path


def show_config() -> None:
    """Print current configuration."""
    config = load_config()
    config_file = find_config_file()

    print("=" * 60)
    print("activity-watcher configuration")
    print("=" * 60)

    if config_file:
        print(f"Config file: {config_file}")
    else:
        print("Config file: (using defaults)")

    try:
        thresholds = load_settings(config).thresholds
    except ConfigurationError as e:
        print(f"Thresholds: invalid ({e})")
    else:
        print(f"Reminder after:         {format_minutes(thresholds.reminder_minutes)}")
        print(f"Disqualification after: {format_minutes(thresholds.disqualify_minutes)}")

    print()
    print(yaml.dump(config, default_flow_style=False, sort_keys=False))
