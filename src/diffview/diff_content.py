"""Two-way aligned content and write-back helpers."""

from typing import List, Sequence

from diffview.diff_settings import DiffViewSettings
from diffview.diff_types import (
    AlignedContent,
    AlignedLineInfo,
    FilePair,
    LineKind,
    ThreeWayAlignedContent,
)


def align_sides(file_pair: FilePair, settings: DiffViewSettings | None = None) -> AlignedContent:
    """
    Flatten a file pair's hunks into left and right buffer content.

    Each LinePair becomes one row. A row is a hunk boundary when it is the
    first changed row after a context row or the first changed row of a new
    hunk, so that next/previous-change navigation still works when the diff
    was produced with unlimited context (a single giant hunk).

    Args:
        file_pair: File pair with side-by-side hunks
        settings: Engine settings (defaults used when None)

    Returns:
        Aligned content for both buffers
    """
    if settings is None:
        settings = DiffViewSettings.create_default()

    content = AlignedContent()
    prev_context = True
    prev_hunk_index = 0

    for hunk_index, hunk in enumerate(file_pair.hunks, start=1):
        for pair in hunk.pairs:
            is_context = pair.left_kind == LineKind.CONTEXT and pair.right_kind == LineKind.CONTEXT
            new_hunk = hunk_index != prev_hunk_index

            content.left_lines.append(
                settings.filler_text if pair.left_content is None else pair.left_content
            )
            content.right_lines.append(
                settings.filler_text if pair.right_content is None else pair.right_content
            )
            content.line_map.append(AlignedLineInfo(
                left_kind=pair.left_kind,
                right_kind=pair.right_kind,
                left_lineno=pair.left_lineno,
                right_lineno=pair.right_lineno,
                hunk_index=hunk_index,
                is_hunk_boundary=not is_context and (prev_context or new_hunk)
            ))

            prev_context = is_context
            prev_hunk_index = hunk_index

    return content


def strip_filler_lines(lines: Sequence[str], kinds: Sequence[LineKind]) -> List[str]:
    """
    Drop synthetic filler rows from a column of aligned lines.

    Args:
        lines: Column content, one entry per aligned row
        kinds: The column's line kind for each row

    Returns:
        The real lines, ready to be written back to a file or the index
    """
    return [line for line, kind in zip(lines, kinds) if kind != LineKind.FILLER]


def real_lines(content: AlignedContent | ThreeWayAlignedContent, side: str) -> List[str]:
    """
    Get one column of aligned content with filler rows removed.

    Args:
        content: Two-way or three-way aligned content
        side: "left" or "right", or "mid" for three-way content

    Returns:
        The column's real lines

    Raises:
        ValueError: If the side does not exist for this kind of content
    """
    if side == "left":
        return strip_filler_lines(content.left_lines, [info.left_kind for info in content.line_map])

    if side == "right":
        return strip_filler_lines(content.right_lines, [info.right_kind for info in content.line_map])

    if side == "mid" and isinstance(content, ThreeWayAlignedContent):
        return strip_filler_lines(content.mid_lines, [info.mid_kind for info in content.line_map])

    raise ValueError(f"Unknown side for {type(content).__name__}: {side!r}")
