"""Transform unified diff hunks into side-by-side line pairs."""

from typing import List, Sequence

from diffview.diff_types import (
    FilePair,
    FileStatus,
    Hunk,
    LineKind,
    LinePair,
    RawFileDiff,
    RawHunk,
)


def pair_change_run(
    del_lines: Sequence[str],
    del_linenos: Sequence[int],
    add_lines: Sequence[str],
    add_linenos: Sequence[int]
) -> List[LinePair]:
    """
    Pair a run of deletions with the run of additions that follows it.

    Lines are paired by position within the run, not by content: the first
    min(deletions, additions) become "change" pairs, extra deletions get a
    filler on the right and extra additions get a filler on the left.

    Args:
        del_lines: Deleted line contents (without the '-' prefix)
        del_linenos: Old-file line numbers of the deletions
        add_lines: Added line contents (without the '+' prefix)
        add_linenos: New-file line numbers of the additions

    Returns:
        One LinePair per row
    """
    paired = min(len(del_lines), len(add_lines))
    pairs: List[LinePair] = []

    for i in range(paired):
        pairs.append(LinePair(
            left_content=del_lines[i],
            right_content=add_lines[i],
            left_kind=LineKind.CHANGE,
            right_kind=LineKind.CHANGE,
            left_lineno=del_linenos[i],
            right_lineno=add_linenos[i]
        ))

    for i in range(paired, len(del_lines)):
        pairs.append(LinePair(
            left_content=del_lines[i],
            right_content=None,
            left_kind=LineKind.DELETE,
            right_kind=LineKind.FILLER,
            left_lineno=del_linenos[i],
            right_lineno=None
        ))

    for i in range(paired, len(add_lines)):
        pairs.append(LinePair(
            left_content=None,
            right_content=add_lines[i],
            left_kind=LineKind.FILLER,
            right_kind=LineKind.ADD,
            left_lineno=None,
            right_lineno=add_linenos[i]
        ))

    return pairs


def pair_hunk_lines(lines: Sequence[str], old_start: int, new_start: int) -> List[LinePair]:
    """
    Transform a hunk's body lines into side-by-side line pairs.

    Args:
        lines: Body lines with their '+', '-', ' ' or '\\' prefix
        old_start: Starting line number in the old file
        new_start: Starting line number in the new file

    Returns:
        Ordered list of line pairs
    """
    pairs: List[LinePair] = []
    old_lineno = old_start
    new_lineno = new_start

    del_lines: List[str] = []
    del_linenos: List[int] = []
    add_lines: List[str] = []
    add_linenos: List[int] = []

    def flush_run() -> None:
        if del_lines or add_lines:
            pairs.extend(pair_change_run(del_lines, del_linenos, add_lines, add_linenos))
            del_lines.clear()
            del_linenos.clear()
            add_lines.clear()
            add_linenos.clear()

    for line in lines:
        prefix = line[:1]
        content = line[1:]

        if prefix == '-':
            del_lines.append(content)
            del_linenos.append(old_lineno)
            old_lineno += 1

        elif prefix == '+':
            add_lines.append(content)
            add_linenos.append(new_lineno)
            new_lineno += 1

        elif prefix == '\\':
            # "\ No newline at end of file" belongs to the preceding run
            continue

        else:
            # Context line: space prefix, or no prefix at all
            flush_run()
            pairs.append(LinePair(
                left_content=content,
                right_content=content,
                left_kind=LineKind.CONTEXT,
                right_kind=LineKind.CONTEXT,
                left_lineno=old_lineno,
                right_lineno=new_lineno
            ))
            old_lineno += 1
            new_lineno += 1

    flush_run()
    return pairs


def pair_hunk(raw_hunk: RawHunk) -> Hunk:
    """Pair the body of a raw hunk."""
    header = raw_hunk.header
    return Hunk(
        header=header,
        pairs=pair_hunk_lines(raw_hunk.lines, header.old_start, header.new_start)
    )


def detect_file_status(old_path: str, new_path: str) -> FileStatus:
    """
    Derive a file status from its old and new paths.

    Args:
        old_path: Old path, "/dev/null" or empty for added files
        new_path: New path, "/dev/null" or empty for deleted files

    Returns:
        The file status
    """
    if old_path in ("/dev/null", ""):
        return FileStatus.ADDED

    if new_path in ("/dev/null", ""):
        return FileStatus.DELETED

    if old_path != new_path:
        return FileStatus.RENAMED

    return FileStatus.MODIFIED


def build_file_pair(raw_file: RawFileDiff) -> FilePair:
    """
    Pair every hunk of a parsed file and count its additions and deletions.

    Args:
        raw_file: File section produced by the parser

    Returns:
        FilePair with side-by-side hunks
    """
    hunks: List[Hunk] = []
    additions = 0
    deletions = 0

    for raw_hunk in raw_file.hunks:
        hunk = pair_hunk(raw_hunk)
        for pair in hunk.pairs:
            if pair.right_kind in (LineKind.ADD, LineKind.CHANGE):
                additions += 1

            if pair.left_kind in (LineKind.DELETE, LineKind.CHANGE):
                deletions += 1

        hunks.append(hunk)

    return FilePair(
        old_path=raw_file.old_path,
        new_path=raw_file.new_path,
        status=raw_file.status,
        hunks=hunks,
        additions=additions,
        deletions=deletions,
        is_binary=raw_file.is_binary
    )
