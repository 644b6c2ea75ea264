"""Settings that tune the diff view engine."""

from dataclasses import dataclass
import json
import os

from diffview.diff_exceptions import DiffSettingsError


@dataclass
class DiffViewSettings:
    """
    Engine settings.

    inline_max_tokens bounds the quadratic token LCS: lines with more tokens than this
    are highlighted as a whole instead of word by word.
    """
    inline_max_tokens: int = 500
    merge_touching_regions: bool = True  # Merge three-way regions whose anchor ranges are adjacent
    filler_text: str = ""  # Text placed in aligned columns for filler rows

    @classmethod
    def create_default(cls) -> "DiffViewSettings":
        """Create a new DiffViewSettings object with default values."""
        return cls()

    @classmethod
    def load(cls, path: str) -> "DiffViewSettings":
        """
        Load settings from file.

        Missing keys keep their default values.

        Args:
            path: Path to the settings file

        Returns:
            DiffViewSettings object with loaded values

        Raises:
            json.JSONDecodeError: If file contains invalid JSON
            DiffSettingsError: If a value has the wrong type or range
        """
        settings = cls.create_default()

        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise DiffSettingsError(
                "Settings file must contain a JSON object",
                {'path': path, 'found': type(data).__name__}
            )

        max_tokens = data.get("inlineMaxTokens", settings.inline_max_tokens)
        if not isinstance(max_tokens, int) or isinstance(max_tokens, bool) or max_tokens < 1:
            raise DiffSettingsError(
                f"inlineMaxTokens must be a positive integer, got {max_tokens!r}",
                {'path': path, 'key': 'inlineMaxTokens'}
            )

        merge_touching = data.get("mergeTouchingRegions", settings.merge_touching_regions)
        if not isinstance(merge_touching, bool):
            raise DiffSettingsError(
                f"mergeTouchingRegions must be a boolean, got {merge_touching!r}",
                {'path': path, 'key': 'mergeTouchingRegions'}
            )

        filler_text = data.get("fillerText", settings.filler_text)
        if not isinstance(filler_text, str):
            raise DiffSettingsError(
                f"fillerText must be a string, got {filler_text!r}",
                {'path': path, 'key': 'fillerText'}
            )

        settings.inline_max_tokens = max_tokens
        settings.merge_touching_regions = merge_touching
        settings.filler_text = filler_text
        return settings

    def save(self, path: str) -> None:
        """
        Save settings to file.

        Args:
            path: Path to save the settings file

        Raises:
            OSError: If there's an issue creating the directory or writing the file
        """
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        data = {
            "inlineMaxTokens": self.inline_max_tokens,
            "mergeTouchingRegions": self.merge_touching_regions,
            "fillerText": self.filler_text,
        }

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=4)
