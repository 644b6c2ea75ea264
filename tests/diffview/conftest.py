"""Shared fixtures and utilities for diff view tests."""

from typing import List

import pytest

from diffview.diff_parser import DiffParser
from diffview.diff_settings import DiffViewSettings
from diffview.diff_types import FilePair, Hunk, HunkHeader, LineKind, LinePair


@pytest.fixture
def parser():
    """Create a diff parser."""
    return DiffParser()


@pytest.fixture
def settings():
    """Create default engine settings."""
    return DiffViewSettings.create_default()


class DiffTestHelpers:
    """Helper utilities for diff view testing."""

    @staticmethod
    def parse_single_file(diff_text: str) -> FilePair:
        """Parse diff text that contains exactly one file."""
        file_pairs = DiffParser().parse(diff_text)
        assert len(file_pairs) == 1
        return file_pairs[0]

    @staticmethod
    def hunk_from_text(diff_text: str) -> Hunk:
        """Parse diff text containing exactly one hunk."""
        file_pair = DiffTestHelpers.parse_single_file(diff_text)
        assert len(file_pair.hunks) == 1
        return file_pair.hunks[0]

    @staticmethod
    def kinds(pairs: List[LinePair]) -> List[tuple]:
        """Summarise pairs as (left_kind, right_kind) tuples."""
        return [(pair.left_kind, pair.right_kind) for pair in pairs]

    @staticmethod
    def make_hunk(old_start: int, old_count: int, new_start: int, new_count: int, pairs: List[LinePair]) -> Hunk:
        """Build a hunk directly from pairs."""
        header = HunkHeader(
            old_start,
            old_count,
            new_start,
            new_count,
            f"@@ -{old_start},{old_count} +{new_start},{new_count} @@"
        )
        return Hunk(header, pairs)

    @staticmethod
    def context(content: str, old_lineno: int, new_lineno: int) -> LinePair:
        """Build a context pair."""
        return LinePair(content, content, LineKind.CONTEXT, LineKind.CONTEXT, old_lineno, new_lineno)


@pytest.fixture
def helpers():
    """Provide test helper utilities."""
    return DiffTestHelpers
