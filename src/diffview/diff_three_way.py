"""
Three-way diff alignment.

Merges two two-way diffs that share a middle state into a single
three-column view: a BEFORE->MIDDLE diff (e.g. HEAD->INDEX) and a
MIDDLE->AFTER diff (e.g. INDEX->WORKTREE). MIDDLE line numbers are the
join key between the two.
"""

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Dict, List, Sequence, Tuple

from diffview.diff_settings import DiffViewSettings
from diffview.diff_types import (
    FilePair,
    Hunk,
    LineKind,
    LinePair,
    ThreeWayAlignedContent,
    ThreeWayFileDiff,
    ThreeWayLineInfo,
)


logger = logging.getLogger("DiffThreeWay")


class DiffSide(Enum):
    """Which of the two input diffs a hunk came from."""

    BEFORE = 0  # BEFORE->MIDDLE, anchored on the new side
    AFTER = 1  # MIDDLE->AFTER, anchored on the old side


@dataclass
class _AnchorInterval:
    """The MIDDLE line range covered by one hunk."""

    start: int
    end: int  # Inclusive
    side: DiffSide
    hunk_index: int
    hunk: Hunk


@dataclass
class _Region:
    """A run of overlapping or touching anchor intervals."""

    start: int
    end: int
    intervals: List[_AnchorInterval] = field(default_factory=list)

    def hunks_for(self, side: DiffSide) -> List[Hunk]:
        return [interval.hunk for interval in self.intervals if interval.side == side]


@dataclass
class _KeyedPair:
    """A line pair plus the MIDDLE line it is positioned at."""

    pair: LinePair
    key: int
    anchored: bool  # False when the pair has no MIDDLE line (filler in the middle column)


def merge_file_lists(
    before_to_mid_files: Sequence[FilePair],
    mid_to_after_files: Sequence[FilePair]
) -> List[ThreeWayFileDiff]:
    """
    Merge the file lists of two diffs by path.

    Files may appear in either or both lists. Paths from the BEFORE->MIDDLE
    list come first, followed by paths that only appear in MIDDLE->AFTER.

    Args:
        before_to_mid_files: Files from the BEFORE->MIDDLE diff
        mid_to_after_files: Files from the MIDDLE->AFTER diff

    Returns:
        One ThreeWayFileDiff per unique path
    """
    before_by_path = {file_pair.path: file_pair for file_pair in before_to_mid_files}
    after_by_path = {file_pair.path: file_pair for file_pair in mid_to_after_files}

    paths = list(before_by_path)
    paths.extend(path for path in after_by_path if path not in before_by_path)

    result: List[ThreeWayFileDiff] = []
    for path in paths:
        before = before_by_path.get(path)
        after = after_by_path.get(path)

        file_diff = ThreeWayFileDiff(path=path)
        if before is not None:
            file_diff.before_to_mid_hunks = before.hunks
            file_diff.status_before_to_mid = before.status
            file_diff.additions += before.additions
            file_diff.deletions += before.deletions

        if after is not None:
            file_diff.mid_to_after_hunks = after.hunks
            file_diff.status_mid_to_after = after.status
            file_diff.additions += after.additions
            file_diff.deletions += after.deletions

        result.append(file_diff)

    return result


def _anchor_interval(hunk: Hunk, side: DiffSide, hunk_index: int) -> _AnchorInterval:
    """Compute the MIDDLE range a hunk covers; a zero count still occupies its start line."""
    if side == DiffSide.BEFORE:
        start, count = hunk.header.new_start, hunk.header.new_count

    else:
        start, count = hunk.header.old_start, hunk.header.old_count

    return _AnchorInterval(start, start + max(count, 1) - 1, side, hunk_index, hunk)


def _group_regions(
    before_hunks: Sequence[Hunk],
    after_hunks: Sequence[Hunk],
    merge_touching: bool
) -> List[_Region]:
    """
    Sort all hunks by MIDDLE anchor and sweep them into regions.

    Args:
        before_hunks: BEFORE->MIDDLE hunks
        after_hunks: MIDDLE->AFTER hunks
        merge_touching: Also merge intervals that are adjacent but do not overlap

    Returns:
        Regions in MIDDLE order
    """
    intervals = [_anchor_interval(hunk, DiffSide.BEFORE, i) for i, hunk in enumerate(before_hunks)]
    intervals.extend(_anchor_interval(hunk, DiffSide.AFTER, i) for i, hunk in enumerate(after_hunks))
    intervals.sort(key=lambda interval: (interval.start, interval.side.value, interval.hunk_index))

    slack = 1 if merge_touching else 0
    regions: List[_Region] = []
    for interval in intervals:
        if regions and interval.start <= regions[-1].end + slack:
            region = regions[-1]
            region.intervals.append(interval)
            region.end = max(region.end, interval.end)
            continue

        regions.append(_Region(interval.start, interval.end, [interval]))

    return regions


def _middle_of(pair: LinePair, side: DiffSide) -> Tuple[str | None, LineKind, int | None]:
    """Return the MIDDLE column (content, kind, line number) of a pair from the given side."""
    if side == DiffSide.BEFORE:
        return pair.right_content, pair.right_kind, pair.right_lineno

    return pair.left_content, pair.left_kind, pair.left_lineno


def _keyed_pairs(hunks: Sequence[Hunk], side: DiffSide) -> List[_KeyedPair]:
    """
    Attach a MIDDLE join key to every pair of a side's hunks.

    Anchored pairs are keyed on their MIDDLE line. A pair with a filler in the
    MIDDLE column is keyed on the MIDDLE line it precedes: the next anchored
    line in its hunk, else the line after the hunk's last anchored line, else
    (for a zero-count hunk) the line after the header's start.
    """
    keyed: List[_KeyedPair] = []

    for hunk in hunks:
        if side == DiffSide.BEFORE:
            start, count = hunk.header.new_start, hunk.header.new_count

        else:
            start, count = hunk.header.old_start, hunk.header.old_count

        anchors = [_middle_of(pair, side)[2] for pair in hunk.pairs]
        anchored_linenos = [lineno for lineno in anchors if lineno is not None]
        if anchored_linenos:
            next_key = anchored_linenos[-1] + 1

        else:
            next_key = start + 1 if count == 0 else start

        hunk_keyed: List[_KeyedPair] = []
        for pair, lineno in zip(reversed(hunk.pairs), reversed(anchors)):
            if lineno is not None:
                next_key = lineno
                hunk_keyed.append(_KeyedPair(pair, lineno, True))

            else:
                hunk_keyed.append(_KeyedPair(pair, next_key, False))

        hunk_keyed.reverse()
        keyed.extend(hunk_keyed)

    return keyed


class _ThreeWayEmitter:
    """Accumulates aligned rows for the three columns."""

    def __init__(self, filler_text: str) -> None:
        self._filler_text = filler_text
        self.content = ThreeWayAlignedContent()
        self._region_index = 0
        self._region_start = False

    def start_region(self) -> None:
        self._region_index += 1
        self._region_start = True

    def emit(
        self,
        left: Tuple[str | None, LineKind, int | None],
        mid: Tuple[str | None, LineKind, int | None],
        right: Tuple[str | None, LineKind, int | None]
    ) -> None:
        """Append one row given (content, kind, line number) for each column."""
        self.content.left_lines.append(self._text(left))
        self.content.mid_lines.append(self._text(mid))
        self.content.right_lines.append(self._text(right))
        self.content.line_map.append(ThreeWayLineInfo(
            left_kind=left[1],
            mid_kind=mid[1],
            right_kind=right[1],
            left_lineno=left[2],
            mid_lineno=mid[2],
            right_lineno=right[2],
            hunk_region_index=self._region_index,
            is_region_boundary=self._region_start
        ))
        self._region_start = False

    def _text(self, column: Tuple[str | None, LineKind, int | None]) -> str:
        content, kind, _ = column
        if kind == LineKind.FILLER or content is None:
            return self._filler_text

        return content


_FILLER: Tuple[str | None, LineKind, int | None] = (None, LineKind.FILLER, None)


def _emit_before_only(emitter: _ThreeWayEmitter, hunks: Sequence[Hunk]) -> None:
    """BEFORE differs from MIDDLE and AFTER == MIDDLE: mirror MIDDLE into AFTER."""
    for hunk in hunks:
        for pair in hunk.pairs:
            _emit_before_pair(emitter, pair)


def _emit_after_only(emitter: _ThreeWayEmitter, hunks: Sequence[Hunk]) -> None:
    """BEFORE == MIDDLE and AFTER differs: mirror MIDDLE into BEFORE."""
    for hunk in hunks:
        for pair in hunk.pairs:
            _emit_after_pair(emitter, pair)


def _emit_before_pair(emitter: _ThreeWayEmitter, pair: LinePair) -> None:
    """Emit a BEFORE->MIDDLE pair with AFTER mirroring MIDDLE (filler stays filler)."""
    left = (pair.left_content, pair.left_kind, pair.left_lineno)
    mid = (pair.right_content, pair.right_kind, pair.right_lineno)
    emitter.emit(left, mid, mid)


def _emit_after_pair(emitter: _ThreeWayEmitter, pair: LinePair) -> None:
    """Emit a MIDDLE->AFTER pair with BEFORE mirroring MIDDLE (filler stays filler)."""
    mid = (pair.left_content, pair.left_kind, pair.left_lineno)
    right = (pair.right_content, pair.right_kind, pair.right_lineno)
    emitter.emit(mid, mid, right)


def _emit_overlapping(
    emitter: _ThreeWayEmitter,
    before_hunks: Sequence[Hunk],
    after_hunks: Sequence[Hunk]
) -> None:
    """
    Merge-join the pairs of both sides on MIDDLE line number.

    The side with the lower key goes first. On equal keys a filler row goes
    before an anchored row, two fillers are combined into one row, and two
    anchored rows for the same MIDDLE line become one row.
    """
    before = _keyed_pairs(before_hunks, DiffSide.BEFORE)
    after = _keyed_pairs(after_hunks, DiffSide.AFTER)
    bi = 0
    ai = 0

    while bi < len(before) or ai < len(after):
        if ai >= len(after):
            _emit_before_pair(emitter, before[bi].pair)
            bi += 1
            continue

        if bi >= len(before):
            _emit_after_pair(emitter, after[ai].pair)
            ai += 1
            continue

        b = before[bi]
        a = after[ai]

        if b.key < a.key or (b.key == a.key and not b.anchored and a.anchored):
            _emit_before_pair(emitter, b.pair)
            bi += 1
            continue

        if a.key < b.key or (b.key == a.key and b.anchored and not a.anchored):
            _emit_after_pair(emitter, a.pair)
            ai += 1
            continue

        left = (b.pair.left_content, b.pair.left_kind, b.pair.left_lineno)
        right = (a.pair.right_content, a.pair.right_kind, a.pair.right_lineno)

        if not b.anchored:
            # Removed on the way to MIDDLE and added on the way to AFTER at the same point
            emitter.emit(left, _FILLER, right)

        else:
            mid = (b.pair.right_content, b.pair.right_kind, b.pair.right_lineno)
            if b.pair.right_content != a.pair.left_content:
                logger.debug(
                    "middle line %s differs between diffs: %r vs %r",
                    b.key, b.pair.right_content, a.pair.left_content
                )

            emitter.emit(left, mid, right)

        bi += 1
        ai += 1


def align_three_way(
    file_diff: ThreeWayFileDiff,
    settings: DiffViewSettings | None = None
) -> ThreeWayAlignedContent:
    """
    Align a ThreeWayFileDiff into three columns of buffer content.

    Hunks from both diffs are grouped into regions by their MIDDLE anchor
    ranges. Regions touched by one diff mirror MIDDLE into the untouched
    column; regions touched by both are merge-joined on MIDDLE line number.
    The first row of each region is flagged as a region boundary.

    Args:
        file_diff: The file's hunks from both diffs
        settings: Engine settings (defaults used when None)

    Returns:
        Aligned content; all columns have one entry per row
    """
    if settings is None:
        settings = DiffViewSettings.create_default()

    emitter = _ThreeWayEmitter(settings.filler_text)
    regions = _group_regions(
        file_diff.before_to_mid_hunks,
        file_diff.mid_to_after_hunks,
        settings.merge_touching_regions
    )

    for region in regions:
        before_hunks = region.hunks_for(DiffSide.BEFORE)
        after_hunks = region.hunks_for(DiffSide.AFTER)
        emitter.start_region()

        if before_hunks and after_hunks:
            _emit_overlapping(emitter, before_hunks, after_hunks)

        elif before_hunks:
            _emit_before_only(emitter, before_hunks)

        else:
            _emit_after_only(emitter, after_hunks)

    return emitter.content


def align_three_way_files(
    before_to_mid_files: Sequence[FilePair],
    mid_to_after_files: Sequence[FilePair],
    settings: DiffViewSettings | None = None
) -> Dict[str, ThreeWayAlignedContent]:
    """
    Merge two file lists and align every file.

    Args:
        before_to_mid_files: Files from the BEFORE->MIDDLE diff
        mid_to_after_files: Files from the MIDDLE->AFTER diff
        settings: Engine settings (defaults used when None)

    Returns:
        Aligned content keyed by path, in merged file order
    """
    return {
        file_diff.path: align_three_way(file_diff, settings)
        for file_diff in merge_file_lists(before_to_mid_files, mid_to_after_files)
    }
