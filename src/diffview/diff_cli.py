"""
Command-line front end for the diff view engine.

Reads unified diff text and prints the aligned side-by-side or three-way model.

Usage:
    python -m diffview split <diff_file>
    python -m diffview three-way <before_to_mid_diff> <mid_to_after_diff>

Use "-" as a file name to read from stdin.
"""

import argparse
import logging
from logging.handlers import RotatingFileHandler
import sys
from typing import List, Sequence

from diffview.diff_content import align_sides
from diffview.diff_exceptions import DiffSettingsError
from diffview.diff_inline import compute_inline_diff
from diffview.diff_parser import DiffParser
from diffview.diff_settings import DiffViewSettings
from diffview.diff_three_way import align_three_way, merge_file_lists
from diffview.diff_types import FileStatus, InlineDiffRange, LineKind


class Colors:
    """ANSI color codes for terminal output."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'
    DIM = '\033[2m'
    RED_BG = '\033[41m'
    GREEN_BG = '\033[42m'

    @classmethod
    def disable(cls) -> None:
        """Disable colors (for non-terminal output)."""
        cls.RESET = ''
        cls.BOLD = ''
        cls.RED = ''
        cls.GREEN = ''
        cls.YELLOW = ''
        cls.CYAN = ''
        cls.DIM = ''
        cls.RED_BG = ''
        cls.GREEN_BG = ''

    @classmethod
    def enabled(cls) -> bool:
        """Check whether colors are active."""
        return cls.RESET != ''


def setup_logging(log_file: str | None, verbose: bool) -> None:
    """
    Configure logging for the command-line tool.

    Args:
        log_file: Write logs to this file (rotated at 1MB) instead of stderr
        verbose: Log at DEBUG rather than WARNING level
    """
    handlers: List[logging.Handler] = []
    if log_file:
        handlers.append(RotatingFileHandler(
            log_file,
            maxBytes=1024*1024,  # 1MB
            backupCount=4,
            encoding='utf-8'
        ))

    else:
        handlers.append(logging.StreamHandler(sys.stderr))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


_KIND_COLORS = {
    LineKind.ADD: 'GREEN',
    LineKind.DELETE: 'RED',
    LineKind.CHANGE: 'YELLOW',
    LineKind.FILLER: 'DIM',
}

_KIND_MARKERS = {
    LineKind.CONTEXT: ' ',
    LineKind.ADD: '+',
    LineKind.DELETE: '-',
    LineKind.CHANGE: '~',
    LineKind.FILLER: ' ',
}


class DiffViewCLI:
    """
    Command-line application.

    Coordinates reading diff input, running the engine and formatting rows.
    """

    def __init__(self, args: argparse.Namespace):
        """
        Initialize the application with command-line arguments.

        Args:
            args: Parsed command-line arguments
        """
        self.args = args
        self._logger = logging.getLogger("DiffViewCLI")
        self.parser = DiffParser()
        self.settings = DiffViewSettings.create_default()
        self.width = args.width

        if not sys.stdout.isatty() or args.no_color:
            Colors.disable()

    def run(self) -> int:
        """
        Run the command.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        if self.args.settings:
            try:
                self.settings = DiffViewSettings.load(self.args.settings)

            except (OSError, ValueError, DiffSettingsError) as e:
                print(f"Error: cannot load settings {self.args.settings}: {e}", file=sys.stderr)
                return 1

        try:
            if self.args.command == 'split':
                return self._run_split(self._read_input(self.args.diff))

            return self._run_three_way(
                self._read_input(self.args.before_diff),
                self._read_input(self.args.after_diff)
            )

        except (OSError, UnicodeDecodeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    def _read_input(self, path: str) -> str:
        """
        Read diff text from a file, or stdin for "-".

        Bytes that are not valid UTF-8 are kept as surrogate escapes, so inline
        byte ranges still line up with the original file content.
        """
        if path == '-':
            stdin_bytes = getattr(sys.stdin, 'buffer', None)
            if stdin_bytes is None:
                return sys.stdin.read()

            return stdin_bytes.read().decode('utf-8', errors='surrogateescape')

        with open(path, 'r', encoding='utf-8', errors='surrogateescape') as f:
            return f.read()

    def _run_split(self, diff_text: str) -> int:
        file_pairs = self.parser.parse(diff_text)
        self._logger.debug("parsed %d file(s)", len(file_pairs))

        for file_pair in file_pairs:
            print(
                f"{Colors.BOLD}{self._printable(file_pair.path)} [{file_pair.status.value}] "
                f"{Colors.GREEN}+{file_pair.additions}{Colors.RESET}{Colors.BOLD} "
                f"{Colors.RED}-{file_pair.deletions}{Colors.RESET}"
            )
            if file_pair.is_binary:
                print("  Binary file")
                continue

            content = align_sides(file_pair, self.settings)
            for i, info in enumerate(content.line_map):
                if info.is_hunk_boundary:
                    print(f"{Colors.CYAN}@@ hunk {info.hunk_index}{Colors.RESET}")

                left = content.left_lines[i]
                right = content.right_lines[i]
                left_ranges: List[InlineDiffRange] = []
                right_ranges: List[InlineDiffRange] = []
                is_change = info.left_kind == LineKind.CHANGE and info.right_kind == LineKind.CHANGE
                if self.args.inline and is_change:
                    inline = compute_inline_diff(left, right, self.settings)
                    left_ranges = inline.old_ranges
                    right_ranges = inline.new_ranges

                print(
                    self._format_cell(left, info.left_kind, info.left_lineno, left_ranges)
                    + " | "
                    + self._format_cell(
                        right, info.right_kind, info.right_lineno, right_ranges, new_side=True, last=True
                    )
                )

            print()

        return 0

    def _run_three_way(self, before_text: str, after_text: str) -> int:
        file_diffs = merge_file_lists(self.parser.parse(before_text), self.parser.parse(after_text))
        self._logger.debug("merged %d file(s)", len(file_diffs))

        for file_diff in file_diffs:
            print(
                f"{Colors.BOLD}{self._printable(file_diff.path)} "
                f"[{self._status_text(file_diff.status_before_to_mid)}|"
                f"{self._status_text(file_diff.status_mid_to_after)}]{Colors.RESET}"
            )

            content = align_three_way(file_diff, self.settings)
            for i, info in enumerate(content.line_map):
                if info.is_region_boundary:
                    print(f"{Colors.CYAN}@@ region {info.hunk_region_index}{Colors.RESET}")

                print(" | ".join([
                    self._format_cell(content.left_lines[i], info.left_kind, info.left_lineno),
                    self._format_cell(content.mid_lines[i], info.mid_kind, info.mid_lineno),
                    self._format_cell(content.right_lines[i], info.right_kind, info.right_lineno, last=True),
                ]))

            print()

        return 0

    def _status_text(self, status: FileStatus | None) -> str:
        return '-' if status is None else status.value

    def _format_cell(
        self,
        text: str,
        kind: LineKind,
        lineno: int | None,
        ranges: Sequence[InlineDiffRange] = (),
        new_side: bool = False,
        last: bool = False
    ) -> str:
        """
        Format one column of a row.

        Args:
            text: Column content
            kind: Line kind, selects the marker and color
            lineno: Original line number, blank for filler rows
            ranges: Inline byte ranges to highlight
            new_side: Ranges mark added text rather than deleted text
            last: Don't pad the final column

        Returns:
            Formatted cell
        """
        gutter = "    " if lineno is None else f"{lineno:4d}"
        visible = text[:self.width]
        pad = "" if last else " " * (self.width - len(visible))
        if ranges:
            visible = self._mark_ranges(visible, ranges, new_side)

        else:
            visible = self._printable(visible)

        color = getattr(Colors, _KIND_COLORS[kind]) if kind in _KIND_COLORS else ''
        reset = Colors.RESET if color else ''
        return f"{gutter} {color}{_KIND_MARKERS[kind]}{reset} {color}{visible}{reset}{pad}"

    def _mark_ranges(self, text: str, ranges: Sequence[InlineDiffRange], new_side: bool) -> str:
        """Wrap byte ranges of a line in highlight markers."""
        data = text.encode('utf-8', errors='surrogateescape')
        parts: List[str] = []
        col = 0
        for r in ranges:
            if r.col_start >= len(data):
                break

            parts.append(data[col:r.col_start].decode('utf-8', errors='replace'))
            parts.append(self._highlight(data[r.col_start:r.col_end].decode('utf-8', errors='replace'), new_side))
            col = min(r.col_end, len(data))

        parts.append(data[col:].decode('utf-8', errors='replace'))
        return ''.join(parts)

    def _printable(self, text: str) -> str:
        """Replace surrogate-escaped bytes with U+FFFD so the text can be printed."""
        return text.encode('utf-8', errors='surrogateescape').decode('utf-8', errors='replace')

    def _highlight(self, text: str, new_side: bool) -> str:
        if Colors.enabled():
            background = Colors.GREEN_BG if new_side else Colors.RED_BG
            return f"{background}{text}{Colors.RESET}{Colors.YELLOW}"

        return f"{{+{text}+}}" if new_side else f"[-{text}-]"


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='diffview',
        description='Show unified diffs as aligned side-by-side or three-way views'
    )

    parser.add_argument('--settings', help='JSON settings file')
    parser.add_argument('--width', type=int, default=40, help='Column width (default: 40)')
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')
    parser.add_argument('--verbose', action='store_true', help='Log debug output')
    parser.add_argument('--log-file', help='Write logs to this file instead of stderr')

    subparsers = parser.add_subparsers(dest='command', required=True)

    split = subparsers.add_parser('split', help='Two-way side-by-side view of one diff')
    split.add_argument('diff', help='Unified diff file ("-" for stdin)')
    split.add_argument('--inline', action='store_true', help='Highlight changed words in changed lines')

    three_way = subparsers.add_parser('three-way', help='Three-way view of two diffs sharing a middle state')
    three_way.add_argument('before_diff', help='BEFORE->MIDDLE diff file (e.g. git diff --cached)')
    three_way.add_argument('after_diff', help='MIDDLE->AFTER diff file (e.g. git diff)')

    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(args.log_file, args.verbose)
    return DiffViewCLI(args).run()
