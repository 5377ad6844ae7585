"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are API constraints and implementation details.

For configurable values, see models.py (GitHubConfig, AnalysisConfig, etc.).
"""

# =============================================================================
# GitHub API Maximums
# =============================================================================
# Hard caps. Users can configure defaults below these, but cannot exceed them.

PER_PAGE_MAX = 100
"""GitHub refuses page sizes above 100."""

MAX_FILES_LIMIT = 3000
"""GitHub's pull request files endpoint stops listing after 3000 files."""

# =============================================================================
# Analysis Defaults
# =============================================================================

DEFAULT_EXTENSIONS = (".py",)
"""File suffixes the block extractor understands."""

PATCH_CONTEXT_NOTE = (
    "Smart diffs from patches use only the hunk context. "
    "For full accuracy, prefer a GitHub PR URL."
)
"""Shown with every patch-based analysis."""

PATCH_UNAVAILABLE = "(Patch unavailable for this file)"
"""Placeholder in the standard diff for files GitHub sends without a patch."""
