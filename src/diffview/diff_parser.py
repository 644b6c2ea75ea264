"""Unified diff parsing."""

from enum import Enum, auto
import logging
import re
from typing import Callable, Dict, List, Sequence

from diffview.diff_pairing import build_file_pair, detect_file_status
from diffview.diff_types import FilePair, FileStatus, HunkHeader, RawFileDiff, RawHunk


class ParserState(Enum):
    """Position of the parser within a diff stream."""

    OUTSIDE_FILE = auto()  # Before the first file header, or after an unusable one
    OUTSIDE_HUNK = auto()  # Within a file's header block
    INSIDE_HUNK = auto()  # Within a hunk body


class DiffParser:
    """
    Best-effort parser for unified diff output, as produced by git diff.

    The parser is an explicit state machine. Header patterns are only tested
    while outside a hunk; inside a hunk the only recognised boundaries are a
    new "@@" hunk header or a new "diff --git" file header, so body lines such
    as a deleted "--- comment" are never mistaken for file headers.

    Parsing never fails: lines that do not match the expected grammar are
    skipped and the result is simply less complete.
    """

    FILE_HEADER_PATTERN = re.compile(r'^diff --git a/(.+) b/(.+)$')
    HUNK_HEADER_PATTERN = re.compile(r'^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@')

    def __init__(self) -> None:
        """Initialize the parser."""
        self._logger = logging.getLogger("DiffParser")
        self._handlers: Dict[ParserState, Callable[[str], None]] = {
            ParserState.OUTSIDE_FILE: self._handle_outside_file,
            ParserState.OUTSIDE_HUNK: self._handle_outside_hunk,
            ParserState.INSIDE_HUNK: self._handle_inside_hunk,
        }
        self._reset()

    def _reset(self) -> None:
        """Clear all per-parse state."""
        self._state = ParserState.OUTSIDE_FILE
        self._files: List[RawFileDiff] = []
        self._current_file: RawFileDiff | None = None
        self._current_hunk: RawHunk | None = None
        self._seen_git_header = False
        self._implicit_file = False

    @classmethod
    def parse_hunk_header(cls, line: str) -> HunkHeader | None:
        """
        Parse a hunk header line.

        Args:
            line: The @@ header line

        Returns:
            Parsed header, or None if the line is not a valid hunk header
        """
        match = cls.HUNK_HEADER_PATTERN.match(line)
        if not match:
            return None

        return HunkHeader(
            old_start=int(match.group(1)),
            old_count=int(match.group(2)) if match.group(2) else 1,
            new_start=int(match.group(3)),
            new_count=int(match.group(4)) if match.group(4) else 1,
            text=line
        )

    def parse_raw(self, diff: str | Sequence[str]) -> List[RawFileDiff]:
        """
        Parse unified diff output into per-file sections with unpaired hunks.

        Args:
            diff: Diff text, or the diff already split into lines

        Returns:
            List of file sections in the order they appear
        """
        self._reset()

        for line in self._split_lines(diff):
            self._dispatch(line)

        self._finish_file()
        files = self._files
        self._reset()
        return files

    def parse(self, diff: str | Sequence[str]) -> List[FilePair]:
        """
        Parse unified diff output into side-by-side file pairs.

        Args:
            diff: Diff text, or the diff already split into lines

        Returns:
            List of file pairs with paired hunks and addition/deletion counts
        """
        return [build_file_pair(raw_file) for raw_file in self.parse_raw(diff)]

    def _split_lines(self, diff: str | Sequence[str]) -> List[str]:
        """Split diff text on newlines, dropping the empty string after a trailing newline."""
        if not isinstance(diff, str):
            return list(diff)

        lines = diff.split('\n')
        if lines and lines[-1] == '':
            lines.pop()

        return lines

    def _dispatch(self, line: str) -> None:
        """Route a line to the handler for the current state."""
        self._handlers[self._state](line)

    def _handle_outside_file(self, line: str) -> None:
        if line.startswith('diff --git '):
            self._start_git_file(line)
            return

        # Plain "diff -u" output has no "diff --git" line; let ---, +++ or @@ open a file
        if self._seen_git_header:
            return

        if line.startswith('--- '):
            path = self._extract_path(line[4:], 'a/')
            self._open_file(path, path, detect_file_status(path, path), implicit=True)
            return

        if line.startswith('@@'):
            self._open_file('', '', FileStatus.MODIFIED, implicit=True)
            self._start_hunk(line)

    def _handle_outside_hunk(self, line: str) -> None:
        assert self._current_file is not None

        if line.startswith('diff --git '):
            self._start_git_file(line)

        elif line.startswith('@@'):
            self._start_hunk(line)

        elif line.startswith('Binary files'):
            self._current_file.is_binary = True

        elif line.startswith('--- '):
            if line.startswith('--- /dev/null'):
                self._current_file.status = FileStatus.ADDED

        elif line.startswith('+++ '):
            if self._implicit_file and not self._current_file.hunks:
                self._current_file.new_path = self._extract_path(line[4:], 'b/')
                self._current_file.status = detect_file_status(
                    self._current_file.old_path, self._current_file.new_path
                )

            elif line.startswith('+++ /dev/null'):
                self._current_file.status = FileStatus.DELETED

        elif line.startswith('new file mode'):
            self._current_file.status = FileStatus.ADDED

        elif line.startswith('deleted file mode'):
            self._current_file.status = FileStatus.DELETED

        elif line.startswith('rename from '):
            self._current_file.status = FileStatus.RENAMED

        elif line.startswith('copy from '):
            self._current_file.status = FileStatus.COPIED

        # similarity/dissimilarity index, rename to, copy to, index and mode lines carry nothing we use

    def _handle_inside_hunk(self, line: str) -> None:
        assert self._current_hunk is not None

        if line.startswith('diff --git '):
            self._start_git_file(line)
            return

        if line.startswith('@@'):
            self._start_hunk(line)
            return

        self._current_hunk.lines.append(line)

    def _start_git_file(self, line: str) -> None:
        """Finish the current file and open the one named by a "diff --git" header."""
        self._seen_git_header = True
        self._finish_file()

        match = self.FILE_HEADER_PATTERN.match(line)
        if not match:
            self._logger.debug("skipping unrecognised file header: %r", line)
            self._state = ParserState.OUTSIDE_FILE
            return

        old_path, new_path = match.group(1), match.group(2)
        self._open_file(old_path, new_path, detect_file_status(old_path, new_path), implicit=False)

    def _open_file(self, old_path: str, new_path: str, status: FileStatus, implicit: bool) -> None:
        self._current_file = RawFileDiff(old_path=old_path, new_path=new_path, status=status)
        self._implicit_file = implicit
        self._state = ParserState.OUTSIDE_HUNK

    def _start_hunk(self, line: str) -> None:
        """Finish the current hunk and open a new one if the header is valid."""
        self._finish_hunk()

        header = self.parse_hunk_header(line)
        if header is None:
            self._logger.debug("skipping malformed hunk header: %r", line)
            self._state = ParserState.OUTSIDE_HUNK
            return

        self._current_hunk = RawHunk(header=header)
        self._state = ParserState.INSIDE_HUNK

    def _finish_hunk(self) -> None:
        if self._current_hunk is not None and self._current_file is not None:
            self._current_file.hunks.append(self._current_hunk)

        self._current_hunk = None

    def _finish_file(self) -> None:
        self._finish_hunk()
        if self._current_file is not None:
            self._files.append(self._current_file)

        self._current_file = None
        self._implicit_file = False
        self._state = ParserState.OUTSIDE_FILE

    def _extract_path(self, path_field: str, prefix: str) -> str:
        """
        Extract a path from the text following "--- " or "+++ ".

        Strips any tab-separated timestamp and the a/ or b/ prefix.

        Args:
            path_field: Text after the marker
            prefix: The prefix git uses for this side

        Returns:
            The bare path, or "/dev/null"
        """
        path = path_field.split('\t', 1)[0].rstrip()
        if path != '/dev/null' and path.startswith(prefix):
            path = path[len(prefix):]

        return path
