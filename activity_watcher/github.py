"""GitHub REST API client for issues, timelines and repositories."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterator

from .http import get_limiter, requests

LOG = logging.getLogger(__name__)

_ISSUE_URL_RE = re.compile(
    r"^https://github\.com/(?P<owner>[^/]+)/(?P<repo>[^/]+)/(?:issues|pull)/(?P<number>\d+)/?$"
)


class CollaboratorFetchError(RuntimeError):
    """Raised when a GitHub call fails or returns an unexpected payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass(frozen=True)
class IssueRef:
    owner: str
    repo: str
    number: int


def parse_github_url(url: str) -> IssueRef:
    """Split an issue or pull request URL into owner/repo/number."""
    m = _ISSUE_URL_RE.match((url or "").strip())
    if not m:
        raise ValueError(f"Not a GitHub issue URL: {url}")
    return IssueRef(m.group("owner"), m.group("repo"), int(m.group("number")))


class GitHubClient:
    """Small wrapper around the GitHub REST API with lazy pagination."""

    def __init__(self, token: str, *, api_url: str = "https://api.github.com", timeout: float = 20):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def _url(self, path: str) -> str:
        if path.startswith("http"):
            return path
        return f"{self.api_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, **kwargs):
        url = self._url(path)
        try:
            r = getattr(requests, method)(url, headers=self._headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise CollaboratorFetchError(f"{method.upper()} {url} failed: {e}") from e
        get_limiter().observe(r.headers)
        return r

    def _check(self, r, what: str) -> None:
        if r.status_code >= 400:
            raise CollaboratorFetchError(
                f"{what} failed: HTTP {r.status_code} - {r.text[:200]}", status_code=r.status_code
            )

    def request_json(self, method: str, path: str, **kwargs) -> Any:
        r = self._send(method, path, **kwargs)
        self._check(r, f"{method.upper()} {path}")
        if not r.content:
            return {}
        try:
            return r.json()
        except ValueError as e:
            raise CollaboratorFetchError(f"{method.upper()} {path} returned invalid JSON: {e}") from e

    def paginate(self, path: str, params: dict | None = None) -> Iterator[dict]:
        """Yield items page by page, following Link rel="next"."""
        url: str | None = path
        query = {"per_page": 100, **(params or {})}
        while url:
            r = self._send("get", url, params=query)
            self._check(r, f"GET {url}")
            try:
                page = r.json()
            except ValueError as e:
                raise CollaboratorFetchError(f"GET {url} returned invalid JSON: {e}") from e
            if not isinstance(page, list):
                raise CollaboratorFetchError(f"GET {url} returned unexpected paginated payload shape")
            for item in page:
                if isinstance(item, dict):
                    yield item
            url = (r.links or {}).get("next", {}).get("url")
            # the next link already carries the query string
            query = None

    # ------------------------------------------------------------------
    # Issues
    # ------------------------------------------------------------------

    def get_issue(self, ref: IssueRef) -> dict | None:
        """Fetch an issue; None when it cannot be read (404/410)."""
        path = f"repos/{ref.owner}/{ref.repo}/issues/{ref.number}"
        r = self._send("get", path)
        if r.status_code in (404, 410):
            LOG.error("Could not get GitHub issue %s/%s#%d", ref.owner, ref.repo, ref.number)
            return None
        self._check(r, f"GET {path}")
        try:
            return r.json()
        except ValueError as e:
            raise CollaboratorFetchError(f"GET {path} returned invalid JSON: {e}") from e

    def get_assignees(self, ref: IssueRef) -> list[str]:
        issue = self.get_issue(ref)
        if not issue:
            return []
        logins = [(a or {}).get("login") for a in issue.get("assignees") or []]
        if not logins and issue.get("assignee"):
            logins = [issue["assignee"].get("login")]
        return [login for login in logins if login]

    def iter_timeline(self, ref: IssueRef) -> Iterator[dict]:
        return self.paginate(f"repos/{ref.owner}/{ref.repo}/issues/{ref.number}/timeline")

    def create_comment(self, ref: IssueRef, body: str) -> dict:
        return self.request_json(
            "post", f"repos/{ref.owner}/{ref.repo}/issues/{ref.number}/comments", json={"body": body}
        )

    def remove_assignees(self, ref: IssueRef, assignees: list[str]) -> dict:
        return self.request_json(
            "delete",
            f"repos/{ref.owner}/{ref.repo}/issues/{ref.number}/assignees",
            json={"assignees": assignees},
        )

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    def list_repos(self, owner: str) -> list[dict]:
        """List repositories of an organization, falling back to a user."""
        try:
            return list(self.paginate(f"orgs/{owner}/repos", {"type": "all"}))
        except CollaboratorFetchError as e:
            if e.status_code != 404:
                raise
            LOG.debug("%s is not an organization, listing user repositories", owner)
            return list(self.paginate(f"users/{owner}/repos", {"type": "owner"}))

    def list_open_issues(self, owner: str, repo: str) -> Iterator[dict]:
        return self.paginate(f"repos/{owner}/{repo}/issues", {"state": "open"})
