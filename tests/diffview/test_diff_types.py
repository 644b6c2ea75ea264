"""Tests for diff view data types and exceptions."""

from diffview.diff_exceptions import DiffError, DiffSettingsError, DiffSourceError
from diffview.diff_types import FilePair, FileStatus


class TestFilePair:
    """Test the FilePair path property."""

    def test_path_is_new_path(self):
        """Test that a renamed file is identified by its new path."""
        file_pair = FilePair(old_path="old.py", new_path="new.py", status=FileStatus.RENAMED)
        assert file_pair.path == "new.py"

    def test_deleted_file_uses_old_path(self):
        """Test that a file whose new side is /dev/null uses its old path."""
        file_pair = FilePair(old_path="gone.py", new_path="/dev/null", status=FileStatus.DELETED)
        assert file_pair.path == "gone.py"

    def test_empty_new_path_uses_old_path(self):
        """Test that an empty new path falls back to the old path."""
        file_pair = FilePair(old_path="gone.py", new_path="", status=FileStatus.DELETED)
        assert file_pair.path == "gone.py"


class TestFileStatus:
    """Test file status codes."""

    def test_git_letters(self):
        """Test that statuses use git's single-letter codes."""
        assert [status.value for status in FileStatus] == ["A", "D", "M", "R", "C", "U"]


class TestDiffErrors:
    """Test the exception hierarchy."""

    def test_error_details(self):
        """Test that error details are kept alongside the message."""
        error = DiffSourceError("bad index", {'selected_index': 9})

        assert str(error) == "bad index"
        assert error.error_details == {'selected_index': 9}

    def test_details_default_to_none(self):
        """Test that details are optional."""
        assert DiffError("oops").error_details is None

    def test_hierarchy(self):
        """Test that specific errors derive from DiffError."""
        assert issubclass(DiffSourceError, DiffError)
        assert issubclass(DiffSettingsError, DiffError)
