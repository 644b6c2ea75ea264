"""Shared dataclasses for diff view operations."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class LineKind(Enum):
    """Classification of one side of an aligned diff row."""

    CONTEXT = "context"
    ADD = "add"
    DELETE = "delete"
    CHANGE = "change"
    FILLER = "filler"


class FileStatus(Enum):
    """Status of a file within a diff, using git's single-letter codes."""

    ADDED = "A"
    DELETED = "D"
    MODIFIED = "M"
    RENAMED = "R"
    COPIED = "C"
    UNMERGED = "U"


@dataclass
class HunkHeader:
    """Represents a hunk header line (@@ -start,count +start,count @@)."""

    old_start: int  # Starting line number in old file (1-indexed)
    old_count: int  # Number of lines in old file (0 for a pure insertion point)
    new_start: int  # Starting line number in new file (1-indexed)
    new_count: int  # Number of lines in new file (0 for a pure deletion point)
    text: str  # The full @@ header line


@dataclass
class RawHunk:
    """A hunk as read from the diff, before side-by-side pairing."""

    header: HunkHeader
    lines: List[str] = field(default_factory=list)  # Body lines including their prefix character


@dataclass
class RawFileDiff:
    """One file's section of a unified diff, with unpaired hunks."""

    old_path: str
    new_path: str
    status: FileStatus
    hunks: List[RawHunk] = field(default_factory=list)
    is_binary: bool = False


@dataclass
class LinePair:
    """One row of a side-by-side diff."""

    left_content: str | None  # None for filler
    right_content: str | None  # None for filler
    left_kind: LineKind
    right_kind: LineKind
    left_lineno: int | None = None
    right_lineno: int | None = None


@dataclass
class Hunk:
    """A hunk transformed into side-by-side line pairs."""

    header: HunkHeader
    pairs: List[LinePair] = field(default_factory=list)


@dataclass
class FilePair:
    """A file's changes in a two-way diff."""

    old_path: str
    new_path: str
    status: FileStatus
    hunks: List[Hunk] = field(default_factory=list)
    additions: int = 0
    deletions: int = 0
    is_binary: bool = False

    @property
    def path(self) -> str:
        """The path used to identify this file (new path unless the file was deleted)."""
        if self.new_path and self.new_path != "/dev/null":
            return self.new_path

        return self.old_path


@dataclass
class AlignedLineInfo:
    """Metadata for one row of two-way aligned content."""

    left_kind: LineKind
    right_kind: LineKind
    left_lineno: int | None
    right_lineno: int | None
    hunk_index: int  # 1-based
    is_hunk_boundary: bool


@dataclass
class AlignedContent:
    """Two-way aligned buffer content."""

    left_lines: List[str] = field(default_factory=list)
    right_lines: List[str] = field(default_factory=list)
    line_map: List[AlignedLineInfo] = field(default_factory=list)


@dataclass
class ThreeWayLineInfo:
    """Metadata for one row of a three-way (before | mid | after) view."""

    left_kind: LineKind
    mid_kind: LineKind
    right_kind: LineKind
    left_lineno: int | None
    mid_lineno: int | None
    right_lineno: int | None
    hunk_region_index: int  # 1-based
    is_region_boundary: bool


@dataclass
class ThreeWayFileDiff:
    """A file's changes across two diffs that share a middle state."""

    path: str
    before_to_mid_hunks: List[Hunk] = field(default_factory=list)
    mid_to_after_hunks: List[Hunk] = field(default_factory=list)
    status_before_to_mid: FileStatus | None = None
    status_mid_to_after: FileStatus | None = None
    additions: int = 0
    deletions: int = 0


@dataclass
class ThreeWayAlignedContent:
    """Three-way aligned buffer content; all four lists have the same length."""

    left_lines: List[str] = field(default_factory=list)
    mid_lines: List[str] = field(default_factory=list)
    right_lines: List[str] = field(default_factory=list)
    line_map: List[ThreeWayLineInfo] = field(default_factory=list)


@dataclass
class InlineDiffRange:
    """Half-open byte range [col_start, col_end) within a line."""

    col_start: int
    col_end: int


@dataclass
class InlineDiffResult:
    """Intra-line highlight ranges for a changed line pair."""

    old_ranges: List[InlineDiffRange] = field(default_factory=list)
    new_ranges: List[InlineDiffRange] = field(default_factory=list)
