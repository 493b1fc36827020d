from __future__ import annotations

from dataclasses import dataclass, field
from types import TracebackType
from typing import Any

import requests

from . import __version__
from .logging import StructuredLogger, get_logger
from .models import Milestone, PullRequest

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0
ACCEPT = "application/vnd.github.v3+json"
USER_AGENT = f"relnotes/{__version__}"
RELEASE_NOTE_LABEL = "release-note"
MAX_ERROR_BODY = 1024


class GitHubAPIError(RuntimeError):
    """Base class for failures talking to the GitHub REST API."""

    category = "github"

    def __init__(self, message: str, *, url: str | None = None):
        super().__init__(message)
        self.url = url


class GitHubTransportError(GitHubAPIError):
    """The request never produced an HTTP response (DNS, TLS, timeout...)."""

    category = "network"


class GitHubHTTPError(GitHubAPIError):
    """GitHub answered with a non-2xx status."""

    category = "github.http"

    def __init__(self, status: int, url: str, response_text: str = ""):
        self.status = status
        self.response_text = response_text[:MAX_ERROR_BODY]
        super().__init__(
            f"API responded with code: {status} for URL {url} - Response: {self.response_text}",
            url=url,
        )


class GitHubDecodeError(GitHubAPIError):
    """The response body was not the JSON shape we asked for."""

    category = "decode"


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    return value if isinstance(value, int) else None


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def milestone_from_payload(entry: dict[str, Any], origin: str) -> Milestone | None:
    number = _as_int(entry.get("number"))
    if number is None:
        return None
    return Milestone(
        number=number,
        title=_as_str(entry.get("title")),
        description=_as_str(entry.get("description")),
        origin=origin,
    )


def pull_request_from_payload(entry: dict[str, Any], origin: str) -> PullRequest | None:
    number = _as_int(entry.get("number"))
    if number is None:
        return None
    milestone = entry.get("milestone")
    milestone_number = (
        _as_int(milestone.get("number")) if isinstance(milestone, dict) else None
    )
    labels: set[str] = set()
    for label in entry.get("labels") or []:
        if isinstance(label, dict) and isinstance(label.get("name"), str):
            labels.add(label["name"])
        elif isinstance(label, str):
            labels.add(label)
    return PullRequest(
        number=number,
        title=_as_str(entry.get("title")),
        body=_as_str(entry.get("body")),
        milestone_number=milestone_number,
        labels=frozenset(labels),
        origin=origin,
        # The issues endpoint returns plain issues too; PRs carry this key.
        is_pull_request=isinstance(entry.get("pull_request"), dict),
    )


@dataclass
class GitHubRestClient:
    """Read-only REST client for milestones and labelled pull requests.

    The token is explicit configuration: requests are unauthenticated when it
    is empty, which works for public repositories only.
    """

    token: str | None = None
    base_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    session: requests.Session | None = None
    logger: StructuredLogger = field(default_factory=get_logger, repr=False)
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._session = self.session or requests.Session()
        self._session.headers["Accept"] = ACCEPT
        self._session.headers.setdefault("User-Agent", USER_AGENT)
        if self.token:
            self._session.headers["Authorization"] = f"Bearer {self.token}"
        else:
            self._session.headers.pop("Authorization", None)

    # ---- REST helpers -------------------------------------------------
    def repo_url(self, repo: str) -> str:
        return f"{self.base_url.rstrip('/')}/repos/{repo.strip('/')}"

    def _get_list(self, url: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        self.logger.debug("GET request", url=url, params=params)
        try:
            response = self._session.request(
                "GET",
                url,
                params=params,
                headers=self._session.headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise GitHubTransportError(f"GET {url} failed: {exc}", url=url) from exc
        if not 200 <= response.status_code < 300:
            raise GitHubHTTPError(response.status_code, url, response.text or "")
        try:
            data = response.json()
        except ValueError as exc:
            raise GitHubDecodeError(f"Invalid JSON from {url}: {exc}", url=url) from exc
        if not isinstance(data, list):
            raise GitHubDecodeError(
                f"Expected a JSON array from {url}, got {type(data).__name__}", url=url
            )
        return [entry for entry in data if isinstance(entry, dict)]

    # ---- Milestones & pull requests ------------------------------------
    def list_open_milestones(self, repo: str) -> list[Milestone]:
        url = f"{self.repo_url(repo)}/milestones"
        out: list[Milestone] = []
        for entry in self._get_list(url, {"state": "open"}):
            milestone = milestone_from_payload(entry, repo)
            if milestone is not None:
                out.append(milestone)
        return out

    def list_release_note_pulls(self, repo: str, milestone_number: int) -> list[PullRequest]:
        """Pull requests labelled ``release-note`` in the given milestone.

        Plain issues and entries without a milestone are dropped.
        """
        url = f"{self.repo_url(repo)}/issues"
        params = {
            "milestone": milestone_number,
            "state": "all",
            "labels": RELEASE_NOTE_LABEL,
        }
        out: list[PullRequest] = []
        for entry in self._get_list(url, params):
            pr = pull_request_from_payload(entry, repo)
            if pr is None or not pr.is_pull_request or pr.milestone_number is None:
                continue
            out.append(pr)
        return out

    # ---- Lifecycle ----------------------------------------------------
    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> GitHubRestClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = [
    "GitHubAPIError",
    "GitHubDecodeError",
    "GitHubHTTPError",
    "GitHubRestClient",
    "GitHubTransportError",
    "milestone_from_payload",
    "pull_request_from_payload",
]
