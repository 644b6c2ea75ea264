"""
Diff parsing and alignment for interactive diff review.

This package turns unified diff text into side-by-side and three-way
aligned views with word-level change highlighting. Everything here is a
pure transform: no I/O, no global state.
"""

from diffview.diff_content import align_sides, real_lines, strip_filler_lines
from diffview.diff_exceptions import DiffError, DiffSettingsError, DiffSourceError
from diffview.diff_inline import compute_inline_diff, lcs_tokens, tokenize
from diffview.diff_pairing import (
    build_file_pair,
    detect_file_status,
    pair_change_run,
    pair_hunk,
    pair_hunk_lines,
)
from diffview.diff_parser import DiffParser, ParserState
from diffview.diff_settings import DiffViewSettings
from diffview.diff_source import (
    DiffSource,
    DiffSourceType,
    PRCommit,
    PRInfo,
    build_diff_args,
    build_pr_args,
    build_title,
    format_file_count,
    ref_for_source,
)
from diffview.diff_three_way import align_three_way, align_three_way_files, merge_file_lists
from diffview.diff_types import (
    AlignedContent,
    AlignedLineInfo,
    FilePair,
    FileStatus,
    Hunk,
    HunkHeader,
    InlineDiffRange,
    InlineDiffResult,
    LineKind,
    LinePair,
    RawFileDiff,
    RawHunk,
    ThreeWayAlignedContent,
    ThreeWayFileDiff,
    ThreeWayLineInfo,
)

__all__ = [
    # Exceptions
    'DiffError',
    'DiffSourceError',
    'DiffSettingsError',
    # Types
    'LineKind',
    'FileStatus',
    'HunkHeader',
    'RawHunk',
    'RawFileDiff',
    'LinePair',
    'Hunk',
    'FilePair',
    'AlignedLineInfo',
    'AlignedContent',
    'ThreeWayLineInfo',
    'ThreeWayFileDiff',
    'ThreeWayAlignedContent',
    'InlineDiffRange',
    'InlineDiffResult',
    # Settings
    'DiffViewSettings',
    # Parsing and pairing
    'DiffParser',
    'ParserState',
    'pair_change_run',
    'pair_hunk_lines',
    'pair_hunk',
    'detect_file_status',
    'build_file_pair',
    # Alignment
    'align_sides',
    'strip_filler_lines',
    'real_lines',
    'merge_file_lists',
    'align_three_way',
    'align_three_way_files',
    # Inline diff
    'tokenize',
    'lcs_tokens',
    'compute_inline_diff',
    # Sources
    'DiffSourceType',
    'DiffSource',
    'PRCommit',
    'PRInfo',
    'build_diff_args',
    'build_pr_args',
    'build_title',
    'format_file_count',
    'ref_for_source',
]
