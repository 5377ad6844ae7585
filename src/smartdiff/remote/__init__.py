"""Remote sources of file versions."""

from smartdiff.remote.github import (
    GitHubClient,
    PullRequest,
    PullRequestFile,
    PullRequestRef,
    parse_pull_request_url,
)

__all__ = [
    "GitHubClient",
    "PullRequest",
    "PullRequestFile",
    "PullRequestRef",
    "parse_pull_request_url",
]
