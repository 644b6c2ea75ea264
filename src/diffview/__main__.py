"""
CLI entry point for the diff view engine.

This allows the tool to be run as:
    python -m diffview split changes.diff
"""

import sys

from diffview.diff_cli import main

if __name__ == "__main__":
    sys.exit(main())
