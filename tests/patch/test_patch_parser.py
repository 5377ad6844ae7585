"""Unit tests for unified diff parsing (patch/parser.py).

Tests cover:
- Context, removed and added line routing
- File boundaries and file naming
- Hunk mode entry and header skipping
- Diffstat noise inside hunks
- Malformed headers and empty input
"""

from __future__ import annotations

import pytest

from smartdiff.patch import PatchFile, is_diff_stat_line, parse_unified_diff

# ============================================================================
# Fixtures
# ============================================================================

TWO_FILE_PATCH = """\
From 1a2b3c Mon Sep 17 00:00:00 2001
Subject: [PATCH] Tweak helpers

---
 src/app.py    | 4 ++--
 src/util.py   | 1 +
 2 files changed, 3 insertions(+), 2 deletions(-)

diff --git a/src/app.py b/src/app.py
index 83db48f..bf269f4 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,4 +1,4 @@
 def foo():
-    return 1
+    return 2

@@ -10,2 +10,2 @@ def bar():
-    x = 1
+    x = 3
diff --git a/src/util.py b/src/util.py
index 1111111..2222222 100644
--- a/src/util.py
+++ b/src/util.py
@@ -0,0 +1 @@
+VALUE = 1
"""


# ============================================================================
# Tests: Line routing
# ============================================================================


class TestLineRouting:
    """Context, removed and added lines land on the right side."""

    def test_context_goes_to_both_sides(self) -> None:
        files = parse_unified_diff(TWO_FILE_PATCH)
        app = files[0]
        assert app.old_text.startswith("def foo():\n")
        assert app.new_text.startswith("def foo():\n")

    def test_removed_only_in_old(self) -> None:
        app = parse_unified_diff(TWO_FILE_PATCH)[0]
        assert "    return 1\n" in app.old_text
        assert "    return 1\n" not in app.new_text

    def test_added_only_in_new(self) -> None:
        app = parse_unified_diff(TWO_FILE_PATCH)[0]
        assert "    return 2\n" in app.new_text
        assert "    return 2\n" not in app.old_text

    def test_multiple_hunks_concatenate(self) -> None:
        """Bare empty lines between hunks carry no marker and are dropped."""
        app = parse_unified_diff(TWO_FILE_PATCH)[0]
        assert app.old_text == "def foo():\n    return 1\n    x = 1\n"
        assert app.new_text == "def foo():\n    return 2\n    x = 3\n"

    def test_added_lines_against_empty_base(self) -> None:
        patch = (
            "diff --git a/new.py b/new.py\n"
            "new file mode 100644\n"
            "--- /dev/null\n"
            "+++ b/new.py\n"
            "@@ -0,0 +1,3 @@\n"
            "+def a():\n"
            "+    pass\n"
            "+\n"
        )
        [new_file] = parse_unified_diff(patch)
        assert new_file.old_text == ""
        assert new_file.new_text == "def a():\n    pass\n\n"

    def test_crlf_line_endings(self) -> None:
        patch = "diff --git a/x.py b/x.py\r\n@@ -1 +1 @@\r\n-a = 1\r\n+a = 2\r\n"
        [x] = parse_unified_diff(patch)
        assert x.old_text == "a = 1\n"
        assert x.new_text == "a = 2\n"

    def test_no_newline_marker_ignored(self) -> None:
        patch = (
            "diff --git a/x.py b/x.py\n"
            "@@ -1 +1 @@\n"
            "-a = 1\n"
            "\\ No newline at end of file\n"
            "+a = 2\n"
            "\\ No newline at end of file\n"
        )
        [x] = parse_unified_diff(patch)
        assert x.old_text == "a = 1\n"
        assert x.new_text == "a = 2\n"


# ============================================================================
# Tests: File boundaries
# ============================================================================


class TestFileBoundaries:
    """diff --git headers delimit files."""

    def test_one_record_per_header(self) -> None:
        files = parse_unified_diff(TWO_FILE_PATCH)
        assert [f.file_name for f in files] == ["src/app.py", "src/util.py"]

    def test_name_taken_from_b_side(self) -> None:
        patch = "diff --git a/old_name.py b/new_name.py\nrename from old_name.py\n"
        [renamed] = parse_unified_diff(patch)
        assert renamed.file_name == "new_name.py"

    def test_preamble_before_first_header_ignored(self) -> None:
        files = parse_unified_diff(TWO_FILE_PATCH)
        assert all("Subject" not in f.old_text for f in files)

    def test_file_markers_ignored(self) -> None:
        app = parse_unified_diff(TWO_FILE_PATCH)[0]
        assert "a/src/app.py" not in app.old_text
        assert "b/src/app.py" not in app.new_text

    def test_lines_before_hunk_header_ignored(self) -> None:
        patch = "diff --git a/x.py b/x.py\n index 1..2\n+not in a hunk\n"
        [x] = parse_unified_diff(patch)
        assert x.old_text == ""
        assert x.new_text == ""

    def test_file_without_hunks_is_empty(self) -> None:
        patch = "diff --git a/bin.dat b/bin.dat\nBinary files differ\n"
        [binary] = parse_unified_diff(patch)
        assert binary == PatchFile(file_name="bin.dat", old_text="", new_text="")
        assert binary.has_changes is False

    def test_new_header_ends_hunk_mode(self) -> None:
        files = parse_unified_diff(TWO_FILE_PATCH)
        util = files[1]
        assert util.old_text == ""
        assert util.new_text == "VALUE = 1\n"


# ============================================================================
# Tests: Noise and malformed input
# ============================================================================


class TestNoiseAndMalformedInput:
    """Parser degrades instead of failing."""

    def test_diffstat_inside_hunk_dropped(self) -> None:
        patch = (
            "diff --git a/x.py b/x.py\n"
            "@@ -1,2 +1,2 @@\n"
            " a = 1\n"
            " src/x.py | 4 ++--\n"
            "-b = 2\n"
            "+b = 3\n"
        )
        [x] = parse_unified_diff(patch)
        assert "src/x.py" not in x.old_text
        assert "src/x.py" not in x.new_text
        assert x.old_text == "a = 1\nb = 2\n"

    def test_malformed_header_skips_file(self) -> None:
        patch = (
            "diff --git nonsense\n"
            "@@ -1 +1 @@\n"
            "-lost\n"
            "+lost\n"
            "diff --git a/ok.py b/ok.py\n"
            "@@ -1 +1 @@\n"
            "-a\n"
            "+b\n"
        )
        files = parse_unified_diff(patch)
        assert [f.file_name for f in files] == ["ok.py"]
        assert files[0].old_text == "a\n"

    def test_malformed_header_flushes_previous_file(self) -> None:
        patch = "diff --git a/first.py b/first.py\n@@ -1 +1 @@\n+x\ndiff --git broken\n+y\n"
        files = parse_unified_diff(patch)
        assert [f.file_name for f in files] == ["first.py"]
        assert files[0].new_text == "x\n"

    @pytest.mark.parametrize("text", ["", "\n", "just some text\n"])
    def test_no_headers_yields_nothing(self, text: str) -> None:
        assert parse_unified_diff(text) == []


class TestDiffStatLine:
    """Tests for is_diff_stat_line."""

    @pytest.mark.parametrize(
        "line",
        [
            " src/x.py | 4 ++--",
            "src/app.py    | 12 +++++++-----",
            "README.md | 1 -",
        ],
    )
    def test_matches_stat_lines(self, line: str) -> None:
        assert is_diff_stat_line(line) is True

    @pytest.mark.parametrize(
        "line",
        [
            "x = a | b",
            "    return 1",
            "2 files changed, 3 insertions(+)",
            "",
        ],
    )
    def test_ignores_code(self, line: str) -> None:
        assert is_diff_stat_line(line) is False
