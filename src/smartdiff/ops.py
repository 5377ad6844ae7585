"""High-level analysis entry points.

Two sources feed the same core pipeline:

    patch text  -> parse_unified_diff -> (old_text, new_text) per file
    PR URL      -> GitHub base/head contents -> (old_text, new_text) per file

    -> extract old, extract new -> diff_blocks -> AnalysisResult

Grouping is left to the caller (``AnalysisResult.grouped``) so raw entries
stay available.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from smartdiff.blocks import (
    BlockExtractor,
    BlockKind,
    BlockMap,
    DiffEntry,
    GroupedDiff,
    diff_blocks,
    filter_entries,
    group_entries,
)
from smartdiff.config.constants import PATCH_CONTEXT_NOTE, PATCH_UNAVAILABLE
from smartdiff.config.models import SmartDiffConfig
from smartdiff.core.errors import InputError, RemoteError
from smartdiff.core.logging import end_run, start_run
from smartdiff.patch import parse_unified_diff
from smartdiff.remote.github import (
    GitHubClient,
    PullRequestFile,
    PullRequestRef,
    parse_pull_request_url,
)

log = structlog.get_logger(__name__)


@dataclass
class AnalysisResult:
    """Outcome of one analysis run."""

    smart_diffs: list[DiffEntry]
    standard_diff: str
    files_analyzed: int
    pull_request: PullRequestRef | None = None
    note: str | None = None
    skipped_files: list[str] = field(default_factory=list)

    def grouped(self, kind: BlockKind | None = None, *, merge: bool = True) -> list[GroupedDiff]:
        """Entries per file, optionally restricted to one block kind."""
        return group_entries(filter_entries(self.smart_diffs, kind), merge=merge)

    def to_dict(self, kind: BlockKind | None = None, *, merge: bool = True) -> dict[str, Any]:
        return {
            "pull_request": str(self.pull_request) if self.pull_request else None,
            "files_analyzed": self.files_analyzed,
            "skipped_files": self.skipped_files,
            "note": self.note,
            "files": [
                {"file_name": name, "entries": [entry.to_dict() for entry in entries]}
                for name, entries in self.grouped(kind, merge=merge)
            ],
        }


def _is_analyzable(path: str, config: SmartDiffConfig) -> bool:
    return path.endswith(tuple(config.analysis.extensions))


def analyze_patch(
    patch_text: str,
    *,
    config: SmartDiffConfig | None = None,
    extractor: BlockExtractor | None = None,
) -> AnalysisResult:
    """Block-diff every analyzable file in a unified diff.

    Only hunk-covered lines are known, so blocks straddling a hunk boundary
    are seen partially. Blank input yields an empty result.
    """
    config = config or SmartDiffConfig()
    extractor = extractor or BlockExtractor()
    if not patch_text.strip():
        return AnalysisResult(
            smart_diffs=[], standard_diff=patch_text, files_analyzed=0, note=PATCH_CONTEXT_NOTE
        )

    start_run()
    try:
        return _analyze_patch(patch_text, config, extractor)
    finally:
        end_run()


def _analyze_patch(
    patch_text: str, config: SmartDiffConfig, extractor: BlockExtractor
) -> AnalysisResult:
    patch_files = parse_unified_diff(patch_text)
    log.info("analysis_started", source="patch", files=len(patch_files))

    entries: list[DiffEntry] = []
    analyzed = 0
    skipped: list[str] = []
    for patch_file in patch_files:
        if not _is_analyzable(patch_file.file_name, config):
            skipped.append(patch_file.file_name)
            continue
        analyzed += 1
        entries.extend(
            diff_blocks(
                patch_file.file_name,
                extractor.extract(patch_file.old_text),
                extractor.extract(patch_file.new_text),
            )
        )

    log.info("analysis_done", source="patch", files_analyzed=analyzed, changes=len(entries))
    return AnalysisResult(
        smart_diffs=entries,
        standard_diff=patch_text,
        files_analyzed=analyzed,
        note=PATCH_CONTEXT_NOTE,
        skipped_files=skipped,
    )


def _standard_diff(files: list[PullRequestFile]) -> str:
    return "\n".join(f"# {f.filename}\n{f.patch or PATCH_UNAVAILABLE}\n" for f in files)


def _side_blocks(
    client: GitHubClient,
    extractor: BlockExtractor,
    ref: PullRequestRef,
    path: str,
    sha: str,
) -> BlockMap:
    return extractor.extract(client.fetch_file(ref.owner, ref.repo, path, sha))


def analyze_pull_request(
    url: str,
    client: GitHubClient,
    *,
    config: SmartDiffConfig | None = None,
    extractor: BlockExtractor | None = None,
) -> AnalysisResult:
    """Block-diff every analyzable file of a GitHub pull request.

    Whole base and head files are compared, so results are exact.

    Raises:
        InputError: ``url`` is not a pull request URL.
        RemoteError: The API call failed, the pull request touches more than
            ``github.max_files`` files, or a file could not be fetched.
    """
    config = config or SmartDiffConfig()
    extractor = extractor or BlockExtractor()

    ref = parse_pull_request_url(url)
    if ref is None:
        raise InputError.invalid_pr_url(url)

    start_run()
    try:
        return _analyze_pull_request(ref, client, config, extractor)
    finally:
        end_run()


def _analyze_pull_request(
    ref: PullRequestRef,
    client: GitHubClient,
    config: SmartDiffConfig,
    extractor: BlockExtractor,
) -> AnalysisResult:
    pull = client.get_pull_request(ref)
    files = client.list_pull_request_files(ref)
    if len(files) > config.github.max_files:
        raise RemoteError.too_many_files(len(files), config.github.max_files)
    log.info("analysis_started", source="pull_request", pull=str(ref), files=len(files))

    entries: list[DiffEntry] = []
    analyzed = 0
    skipped: list[str] = []
    for pr_file in files:
        if not _is_analyzable(pr_file.filename, config):
            skipped.append(pr_file.filename)
            continue
        analyzed += 1
        old_blocks: BlockMap = {}
        new_blocks: BlockMap = {}
        if pr_file.status != "added":
            base_path = pr_file.previous_filename or pr_file.filename
            old_blocks = _side_blocks(client, extractor, ref, base_path, pull.base_sha)
        if pr_file.status != "removed":
            new_blocks = _side_blocks(client, extractor, ref, pr_file.filename, pull.head_sha)
        entries.extend(diff_blocks(pr_file.filename, old_blocks, new_blocks))

    log.info(
        "analysis_done",
        source="pull_request",
        pull=str(ref),
        files_analyzed=analyzed,
        changes=len(entries),
    )
    return AnalysisResult(
        smart_diffs=entries,
        standard_diff=_standard_diff(files),
        files_analyzed=analyzed,
        pull_request=ref,
        skipped_files=skipped,
    )
