"""GitHub token loading."""
from __future__ import annotations

import logging
import os
import subprocess

LOG = logging.getLogger(__name__)

PASS_PATH = "api/github"


def load_from_pass(pass_path: str = PASS_PATH) -> dict | None:
    """Load KEY=value credentials from pass."""
    try:
        result = subprocess.run(
            ["pass", "show", pass_path],
            capture_output=True, text=True, timeout=5
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        LOG.debug("pass unavailable: %s", e)
        return None
    if result.returncode != 0:
        return None
    out: dict[str, str] = {}
    for line in result.stdout.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        k, v = line.split("=", 1)
        out[k.strip()] = v.strip()
    return out if out else None


def get_token() -> str:
    """Return the GitHub token from $GITHUB_TOKEN or pass, exit if missing."""
    token = os.environ.get("GITHUB_TOKEN", "").strip()
    if token:
        return token
    env = load_from_pass() or {}
    token = env.get("GITHUB_TOKEN", "").strip()
    if not token:
        raise SystemExit(f"Missing GITHUB_TOKEN (environment or pass {PASS_PATH})")
    return token
