"""GitHub REST client for pull request sources.

Fetches pull request metadata, the list of changed files and file contents
at a given ref. Every failure surfaces as a RemoteError; nothing is retried
here.
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from types import TracebackType
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from smartdiff.config.models import GitHubConfig
from smartdiff.core.errors import RemoteError

log = structlog.get_logger(__name__)

_PR_URL = re.compile(
    r"^https?://github\.com/(?P<owner>[^/]+)/(?P<repo>[^/]+)/pull/(?P<number>\d+)",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class PullRequestRef:
    owner: str
    repo: str
    number: int

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}#{self.number}"


@dataclass(frozen=True, slots=True)
class PullRequest:
    ref: PullRequestRef
    base_sha: str
    head_sha: str


@dataclass(frozen=True, slots=True)
class PullRequestFile:
    """One entry of the pull request files listing."""

    filename: str
    status: str  # added, removed, modified, renamed, copied, changed, unchanged
    patch: str | None = None
    previous_filename: str | None = None  # set for renames


def parse_pull_request_url(value: str) -> PullRequestRef | None:
    """Read owner, repo and number from a pull request URL.

    Trailing path segments (``/files``, ``/commits``) are allowed.
    """
    match = _PR_URL.match(value.strip())
    if match is None:
        return None
    return PullRequestRef(
        owner=match.group("owner"),
        repo=match.group("repo"),
        number=int(match.group("number")),
    )


class GitHubClient:
    """Thin synchronous GitHub API client.

    Usage::

        with GitHubClient(config.github) as client:
            pull = client.get_pull_request(ref)
            files = client.list_pull_request_files(ref)
            text = client.fetch_file(ref.owner, ref.repo, "src/app.py", pull.head_sha)
    """

    def __init__(
        self,
        config: GitHubConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config or GitHubConfig()
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        self._http = httpx.Client(
            base_url=self._config.api_url,
            headers=headers,
            timeout=self._config.timeout_sec,
            transport=transport,
            follow_redirects=True,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def _get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        try:
            response = self._http.get(url, params=params)
        except httpx.TimeoutException as e:
            raise RemoteError.timeout(url, self._config.timeout_sec) from e
        except httpx.HTTPError as e:
            raise RemoteError.request_failed(url, str(e)) from e

        if response.is_error:
            reason = response.reason_phrase or "error"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict):
                reason = body.get("message", reason)
            log.warning("github_request_failed", url=url, status=response.status_code)
            raise RemoteError.request_failed(url, reason, status=response.status_code)
        return response

    def get_pull_request(self, ref: PullRequestRef) -> PullRequest:
        data = self._get(f"/repos/{ref.owner}/{ref.repo}/pulls/{ref.number}").json()
        return PullRequest(
            ref=ref,
            base_sha=data["base"]["sha"],
            head_sha=data["head"]["sha"],
        )

    def list_pull_request_files(self, ref: PullRequestRef) -> list[PullRequestFile]:
        """List changed files, following ``Link: rel="next"`` pagination."""
        files: list[PullRequestFile] = []
        url: str | None = f"/repos/{ref.owner}/{ref.repo}/pulls/{ref.number}/files"
        params: dict[str, Any] | None = {"per_page": self._config.per_page}

        while url is not None:
            response = self._get(url, params=params)
            files.extend(
                PullRequestFile(
                    filename=item["filename"],
                    status=item.get("status", "modified"),
                    patch=item.get("patch"),
                    previous_filename=item.get("previous_filename"),
                )
                for item in response.json()
            )
            # The next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None

        log.debug("pull_request_files_listed", pull=str(ref), files=len(files))
        return files

    def fetch_file(self, owner: str, repo: str, path: str, ref: str) -> str:
        """Return the decoded text of ``path`` at ``ref``.

        Raises:
            RemoteError: The path is a directory, carries no content, or is
                larger than ``max_file_bytes``.
        """
        url = f"/repos/{owner}/{repo}/contents/{quote(path)}"
        data = self._get(url, params={"ref": ref}).json()
        if isinstance(data, list):
            raise RemoteError.not_a_file(path)
        if "content" not in data:
            raise RemoteError.no_content(path)

        size = data.get("size") or 0
        if size > self._config.max_file_bytes:
            raise RemoteError.file_too_large(path, size, self._config.max_file_bytes)

        return base64.b64decode(data["content"]).decode("utf-8", errors="replace")
