"""
Word-level inline diff highlighting.

When two lines are paired as a "change", the tokens that differ between them
are found with a longest-common-subsequence match over word, whitespace and
symbol tokens. Ranges are byte offsets into the UTF-8 encoding of each line,
matching the byte-indexed columns used by the buffers that display them.
For multi-byte text a range boundary can therefore fall inside a character.
Text decoded with surrogateescape maps back to its original bytes.
"""

from typing import Dict, List, Sequence

from diffview.diff_settings import DiffViewSettings
from diffview.diff_types import InlineDiffRange, InlineDiffResult


_WORD = 0
_SPACE = 1
_SYMBOL = 2


def _byte_class(byte: int) -> int:
    if byte == 0x5F or (0x30 <= byte <= 0x39) or (0x41 <= byte <= 0x5A) or (0x61 <= byte <= 0x7A):
        return _WORD

    if byte in b' \t\n\r\x0b\x0c':
        return _SPACE

    return _SYMBOL


def tokenize(line: str) -> List[bytes]:
    """
    Split a line into maximal runs of word bytes, whitespace bytes or other bytes.

    Word bytes are ASCII letters, digits and underscore. Non-ASCII bytes count
    as symbols. Lone surrogates from a surrogateescape decode are encoded back
    to the bytes they stand for.

    Args:
        line: The line to tokenize

    Returns:
        Tokens in order; joining them gives back the UTF-8 encoded line
    """
    data = line.encode('utf-8', errors='surrogateescape')
    tokens: List[bytes] = []
    i = 0

    while i < len(data):
        token_class = _byte_class(data[i])
        j = i + 1
        while j < len(data) and _byte_class(data[j]) == token_class:
            j += 1

        tokens.append(data[i:j])
        i = j

    return tokens


def lcs_tokens(old_tokens: Sequence[bytes], new_tokens: Sequence[bytes]) -> Dict[int, int]:
    """
    Compute the longest common subsequence of two token sequences.

    Args:
        old_tokens: Tokens from the old line
        new_tokens: Tokens from the new line

    Returns:
        Map from old token index to the new token index it is matched with
    """
    old_len = len(old_tokens)
    new_len = len(new_tokens)
    if old_len == 0 or new_len == 0:
        return {}

    # dp[i * width + j] is the LCS length of old_tokens[:i] and new_tokens[:j]
    width = new_len + 1
    dp = [0] * ((old_len + 1) * width)

    for i in range(1, old_len + 1):
        old_token = old_tokens[i - 1]
        row = i * width
        prev_row = row - width
        for j in range(1, new_len + 1):
            if old_token == new_tokens[j - 1]:
                dp[row + j] = dp[prev_row + j - 1] + 1

            else:
                dp[row + j] = max(dp[prev_row + j], dp[row + j - 1])

    matches: Dict[int, int] = {}
    i = old_len
    j = new_len
    while i > 0 and j > 0:
        if old_tokens[i - 1] == new_tokens[j - 1]:
            matches[i - 1] = j - 1
            i -= 1
            j -= 1

        elif dp[(i - 1) * width + j] >= dp[i * width + j - 1]:
            i -= 1

        else:
            j -= 1

    return matches


def _merge_ranges(ranges: List[InlineDiffRange]) -> List[InlineDiffRange]:
    """Merge adjacent or overlapping ranges; input must be sorted by start."""
    merged: List[InlineDiffRange] = []
    for current in ranges:
        if merged and current.col_start <= merged[-1].col_end:
            merged[-1].col_end = max(merged[-1].col_end, current.col_end)
            continue

        merged.append(InlineDiffRange(current.col_start, current.col_end))

    return merged


def _unmatched_ranges(tokens: Sequence[bytes], matched: Sequence[bool]) -> List[InlineDiffRange]:
    ranges: List[InlineDiffRange] = []
    col = 0
    for token, is_matched in zip(tokens, matched):
        if not is_matched:
            ranges.append(InlineDiffRange(col, col + len(token)))

        col += len(token)

    return _merge_ranges(ranges)


def compute_inline_diff(
    old_line: str,
    new_line: str,
    settings: DiffViewSettings | None = None
) -> InlineDiffResult:
    """
    Compute the ranges to highlight within a changed line pair.

    Args:
        old_line: The old (left) line
        new_line: The new (right) line
        settings: Engine settings (defaults used when None)

    Returns:
        Ranges on the old line to mark as deleted and on the new line to mark as added
    """
    if old_line == new_line:
        return InlineDiffResult()

    old_len = len(old_line.encode('utf-8', errors='surrogateescape'))
    new_len = len(new_line.encode('utf-8', errors='surrogateescape'))

    if old_line == "":
        return InlineDiffResult(new_ranges=[InlineDiffRange(0, new_len)])

    if new_line == "":
        return InlineDiffResult(old_ranges=[InlineDiffRange(0, old_len)])

    if settings is None:
        settings = DiffViewSettings.create_default()

    old_tokens = tokenize(old_line)
    new_tokens = tokenize(new_line)

    if len(old_tokens) > settings.inline_max_tokens or len(new_tokens) > settings.inline_max_tokens:
        return InlineDiffResult(
            old_ranges=[InlineDiffRange(0, old_len)],
            new_ranges=[InlineDiffRange(0, new_len)]
        )

    matches = lcs_tokens(old_tokens, new_tokens)
    old_matched = [i in matches for i in range(len(old_tokens))]
    new_matched = [False] * len(new_tokens)
    for new_index in matches.values():
        new_matched[new_index] = True

    return InlineDiffResult(
        old_ranges=_unmatched_ranges(old_tokens, old_matched),
        new_ranges=_unmatched_ranges(new_tokens, new_matched)
    )
