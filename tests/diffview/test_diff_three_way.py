"""Tests for three-way diff alignment."""

from diffview.diff_parser import DiffParser
from diffview.diff_settings import DiffViewSettings
from diffview.diff_three_way import align_three_way, align_three_way_files, merge_file_lists
from diffview.diff_types import FilePair, FileStatus, LineKind, ThreeWayFileDiff


def _file_pair(hunks_text: str, path: str = "f.txt") -> FilePair:
    """Parse one file's hunks, adding git file headers."""
    diff_text = f"diff --git a/{path} b/{path}\n--- a/{path}\n+++ b/{path}\n{hunks_text}"
    return DiffParser().parse(diff_text)[0]


def _three_way(before_hunks: str = "", after_hunks: str = "") -> ThreeWayFileDiff:
    """Build a ThreeWayFileDiff from hunk text for each side."""
    before = _file_pair(before_hunks).hunks if before_hunks else []
    after = _file_pair(after_hunks).hunks if after_hunks else []
    return ThreeWayFileDiff(path="f.txt", before_to_mid_hunks=before, mid_to_after_hunks=after)


def _assert_columns_aligned(content):
    """Check that all columns and the line map have one entry per row."""
    rows = len(content.line_map)
    assert len(content.left_lines) == rows
    assert len(content.mid_lines) == rows
    assert len(content.right_lines) == rows


class TestMergeFileLists:
    """Test merging two file lists by path."""

    def test_paths_from_both_lists(self):
        """Test ordering, status and count merging."""
        a_before = _file_pair("@@ -1 +1 @@\n-a\n+A\n", "a.txt")
        b_before = _file_pair("@@ -1 +1,2 @@\n b\n+b2\n", "b.txt")
        b_after = _file_pair("@@ -1 +0,0 @@\n-b\n", "b.txt")
        c_after = _file_pair("@@ -1 +1 @@\n-c\n+C\n", "c.txt")

        merged = merge_file_lists([a_before, b_before], [b_after, c_after])

        assert [f.path for f in merged] == ["a.txt", "b.txt", "c.txt"]

        assert merged[0].status_before_to_mid == FileStatus.MODIFIED
        assert merged[0].status_mid_to_after is None
        assert merged[0].mid_to_after_hunks == []

        assert merged[1].additions == 1
        assert merged[1].deletions == 1
        assert len(merged[1].before_to_mid_hunks) == 1
        assert len(merged[1].mid_to_after_hunks) == 1

        assert merged[2].status_before_to_mid is None
        assert merged[2].before_to_mid_hunks == []

    def test_deleted_file_status_is_kept(self):
        """Test that a file deleted in the second diff keeps its path and status."""
        deleted = DiffParser().parse(
            "diff --git a/gone.txt b/gone.txt\n--- a/gone.txt\n+++ /dev/null\n@@ -1 +0,0 @@\n-x\n"
        )[0]

        merged = merge_file_lists([], [deleted])

        assert merged[0].path == "gone.txt"
        assert merged[0].status_mid_to_after == FileStatus.DELETED

    def test_empty_lists(self):
        """Test that no files yields no merged files."""
        assert merge_file_lists([], []) == []


class TestSingleSideRegions:
    """Test regions touched by only one of the two diffs."""

    def test_no_hunks(self):
        """Test that a file without hunks aligns to nothing."""
        content = align_three_way(_three_way())

        assert content.left_lines == []
        assert content.line_map == []

    def test_before_only_mirrors_middle_into_after(self):
        """Test that AFTER equals MIDDLE in a region only the first diff touched."""
        content = align_three_way(_three_way(before_hunks="@@ -1,3 +1,3 @@\n a\n-b\n+B\n c\n"))

        _assert_columns_aligned(content)
        assert content.left_lines == ["a", "b", "c"]
        assert content.mid_lines == ["a", "B", "c"]
        assert content.right_lines == ["a", "B", "c"]

        changed = content.line_map[1]
        assert (changed.left_kind, changed.mid_kind, changed.right_kind) == (
            LineKind.CHANGE, LineKind.CHANGE, LineKind.CHANGE
        )
        for info in content.line_map:
            assert info.mid_lineno == info.right_lineno

    def test_before_only_deletion_is_filler_in_middle_and_after(self):
        """Test that a line removed before MIDDLE is absent from both later columns."""
        content = align_three_way(_three_way(before_hunks="@@ -1,3 +1,2 @@\n a\n-b\n c\n"))

        removed = content.line_map[1]
        assert removed.left_kind == LineKind.DELETE
        assert removed.left_lineno == 2
        assert removed.mid_kind == LineKind.FILLER
        assert removed.right_kind == LineKind.FILLER
        assert removed.mid_lineno is None
        assert removed.right_lineno is None
        assert content.mid_lines[1] == ""
        assert content.right_lines[1] == ""
        assert content.line_map[2].mid_lineno == 2

    def test_after_only_mirrors_middle_into_before(self):
        """Test that BEFORE equals MIDDLE in a region only the second diff touched."""
        content = align_three_way(_three_way(after_hunks="@@ -2 +2,2 @@\n-b\n+B\n+C\n"))

        _assert_columns_aligned(content)
        assert content.left_lines == ["b", ""]
        assert content.mid_lines == ["b", ""]
        assert content.right_lines == ["B", "C"]

        added = content.line_map[1]
        assert (added.left_kind, added.mid_kind, added.right_kind) == (
            LineKind.FILLER, LineKind.FILLER, LineKind.ADD
        )
        assert added.right_lineno == 3
        assert content.line_map[0].left_lineno == content.line_map[0].mid_lineno == 2

    def test_disjoint_regions_are_numbered(self):
        """Test that separate regions get their own index and boundary."""
        content = align_three_way(_three_way(
            before_hunks="@@ -1 +1 @@\n-a\n+A\n",
            after_hunks="@@ -10,2 +10,2 @@\n j\n-k\n+K\n"
        ))

        assert [info.hunk_region_index for info in content.line_map] == [1, 2, 2]
        assert [info.is_region_boundary for info in content.line_map] == [True, True, False]
        assert content.right_lines == ["A", "j", "K"]
        assert content.left_lines == ["a", "j", "k"]

    def test_several_hunks_from_one_side(self):
        """Test that each hunk from the same diff forms its own region when far apart."""
        content = align_three_way(_three_way(
            before_hunks="@@ -1 +1 @@\n-a\n+A\n@@ -20 +20 @@\n-t\n+T\n"
        ))

        assert [info.hunk_region_index for info in content.line_map] == [1, 2]
        assert all(info.is_region_boundary for info in content.line_map)


class TestOverlappingRegions:
    """Test regions touched by both diffs."""

    def test_same_middle_line_changed_twice(self):
        """Test that a line changed in both diffs becomes one row with three versions."""
        content = align_three_way(_three_way(
            before_hunks="@@ -2 +2 @@\n-b\n+b1\n",
            after_hunks="@@ -2 +2 @@\n-b1\n+b2\n"
        ))

        assert len(content.line_map) == 1
        assert (content.left_lines[0], content.mid_lines[0], content.right_lines[0]) == ("b", "b1", "b2")
        info = content.line_map[0]
        assert (info.left_lineno, info.mid_lineno, info.right_lineno) == (2, 2, 2)
        assert info.is_region_boundary is True

    def test_deletion_and_addition_at_same_anchor_share_a_row(self):
        """Test that a removal before MIDDLE and an insertion after it at the same point are one row."""
        content = align_three_way(_three_way(
            before_hunks="@@ -5 +4,0 @@\n-five\n",
            after_hunks="@@ -4,0 +5 @@\n+new five\n"
        ))

        assert len(content.line_map) == 1
        info = content.line_map[0]
        assert (info.left_kind, info.mid_kind, info.right_kind) == (
            LineKind.DELETE, LineKind.FILLER, LineKind.ADD
        )
        assert (info.left_lineno, info.mid_lineno, info.right_lineno) == (5, None, 5)
        assert (content.left_lines[0], content.mid_lines[0], content.right_lines[0]) == ("five", "", "new five")

    def test_filler_rows_inside_shared_context(self):
        """Test that a deletion and an insertion between the same context lines are combined."""
        content = align_three_way(_three_way(
            before_hunks="@@ -1,3 +1,2 @@\n a\n-b\n c\n",
            after_hunks="@@ -1,2 +1,3 @@\n a\n+x\n c\n"
        ))

        _assert_columns_aligned(content)
        assert content.left_lines == ["a", "b", "c"]
        assert content.mid_lines == ["a", "", "c"]
        assert content.right_lines == ["a", "x", "c"]
        assert [info.mid_lineno for info in content.line_map] == [1, None, 2]
        assert [info.right_lineno for info in content.line_map] == [1, 2, 3]

    def test_partially_overlapping_hunks(self):
        """Test merge-join of hunks whose middle ranges only partly overlap."""
        content = align_three_way(_three_way(
            before_hunks="@@ -1,3 +1,3 @@\n a\n-b\n+B\n c\n",
            after_hunks="@@ -3,2 +3,2 @@\n c\n-d\n+D\n"
        ))

        _assert_columns_aligned(content)
        assert content.left_lines == ["a", "b", "c", "d"]
        assert content.mid_lines == ["a", "B", "c", "d"]
        assert content.right_lines == ["a", "B", "c", "D"]
        assert [info.mid_lineno for info in content.line_map] == [1, 2, 3, 4]
        assert [info.is_region_boundary for info in content.line_map] == [True, False, False, False]
        assert all(info.hunk_region_index == 1 for info in content.line_map)

    def test_no_line_is_dropped(self):
        """Test that every line of both diffs appears in the aligned output."""
        before_hunks = "@@ -1,4 +1,3 @@\n a\n-b\n-c\n+BC\n d\n"
        after_hunks = "@@ -2,2 +2,3 @@\n-BC\n+B\n+C\n d\n"
        file_diff = _three_way(before_hunks, after_hunks)
        content = align_three_way(file_diff)

        _assert_columns_aligned(content)
        left_linenos = [info.left_lineno for info in content.line_map if info.left_kind != LineKind.FILLER]
        right_linenos = [info.right_lineno for info in content.line_map if info.right_kind != LineKind.FILLER]
        assert left_linenos == [1, 2, 3, 4]
        assert right_linenos == [1, 2, 3, 4]
        assert [line for line in content.left_lines if line] == ["a", "b", "c", "d"]
        assert [line for line in content.right_lines if line] == ["a", "B", "C", "d"]

    def test_touching_ranges_merge_by_default(self):
        """Test that adjacent middle ranges form one region unless disabled."""
        file_diff = _three_way(
            before_hunks="@@ -1,2 +1,2 @@\n-a\n+A\n b\n",
            after_hunks="@@ -3 +3 @@\n-c\n+C\n"
        )

        merged = align_three_way(file_diff)
        assert [info.hunk_region_index for info in merged.line_map] == [1, 1, 1]

        separate = align_three_way(file_diff, DiffViewSettings(merge_touching_regions=False))
        assert [info.hunk_region_index for info in separate.line_map] == [1, 1, 2]
        assert separate.right_lines == merged.right_lines == ["A", "b", "C"]

    def test_disagreeing_middle_degrades_gracefully(self):
        """Test that inconsistent middle content still produces one row without raising."""
        content = align_three_way(_three_way(
            before_hunks="@@ -2 +2 @@\n-b\n+from before\n",
            after_hunks="@@ -2 +2 @@\n-from after\n+c\n"
        ))

        assert len(content.line_map) == 1
        assert content.mid_lines == ["from before"]
        assert content.right_lines == ["c"]

    def test_filler_text_setting(self):
        """Test that filler rows use the configured filler text."""
        content = align_three_way(
            _three_way(before_hunks="@@ -1,2 +1 @@\n a\n-b\n"),
            DiffViewSettings(filler_text="~")
        )

        assert content.mid_lines == ["a", "~"]
        assert content.right_lines == ["a", "~"]


class TestAlignThreeWayFiles:
    """Test aligning whole file lists."""

    def test_keys_follow_merged_order(self):
        """Test that every merged path is aligned."""
        before = [_file_pair("@@ -1 +1 @@\n-a\n+A\n", "x.txt")]
        after = [_file_pair("@@ -1 +1 @@\n-q\n+Q\n", "y.txt")]

        aligned = align_three_way_files(before, after)

        assert list(aligned) == ["x.txt", "y.txt"]
        assert aligned["x.txt"].right_lines == ["A"]
        assert aligned["y.txt"].left_lines == ["q"]
