"""
Diff source descriptors.

A diff source says which two (or three) states of a repository are being
compared. This module builds the git arguments that produce each source's
diff text, the title shown for it and the ref that yields each side's full
file content. Running git is left to the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from diffview.diff_exceptions import DiffSourceError


class DiffSourceType(Enum):
    """Kinds of comparison the viewer can show."""

    STAGED = "staged"
    UNSTAGED = "unstaged"
    WORKTREE = "worktree"
    COMMIT = "commit"
    RANGE = "range"
    STASH = "stash"
    PR = "pr"
    THREE_WAY = "three_way"
    MERGE = "merge"


@dataclass
class PRCommit:
    """A commit within a pull request."""

    oid: str
    short_oid: str
    message_headline: str
    author_name: str = ""
    author_date: str = ""
    additions: int = 0
    deletions: int = 0


@dataclass
class PRInfo:
    """The parts of a pull request needed to diff it."""

    number: int
    title: str
    base_ref: str
    head_ref: str
    base_oid: str
    head_oid: str
    commits: List[PRCommit] = field(default_factory=list)


@dataclass
class DiffSource:
    """How a diff was produced."""

    type: DiffSourceType
    ref: str | None = None  # Commit or stash ref
    range: str | None = None  # Range expression, e.g. "main..feature"
    pr_info: PRInfo | None = None
    selected_commit: int | None = None  # 1-based index into pr_info.commits, None for the whole PR


def build_diff_args(source_type: DiffSourceType, ref_or_range: str | None = None) -> List[str]:
    """
    Build the git arguments (without "git") that produce a source's diff.

    Args:
        source_type: The kind of diff
        ref_or_range: Ref for commit/stash sources, range expression for range sources

    Returns:
        Git command arguments

    Raises:
        DiffSourceError: If a required ref is missing or the source needs more than one command
    """
    if source_type == DiffSourceType.STAGED:
        return ["diff", "--cached"]

    if source_type == DiffSourceType.UNSTAGED:
        return ["diff"]

    if source_type == DiffSourceType.WORKTREE:
        return ["diff", "HEAD"]

    if source_type in (DiffSourceType.COMMIT, DiffSourceType.RANGE, DiffSourceType.STASH):
        if not ref_or_range:
            raise DiffSourceError(
                f"{source_type.value} source requires a ref",
                {'source_type': source_type.value}
            )

        if source_type == DiffSourceType.COMMIT:
            return ["show", "--format=", ref_or_range]

        if source_type == DiffSourceType.RANGE:
            return ["diff", ref_or_range]

        return ["stash", "show", "-p", ref_or_range]

    raise DiffSourceError(
        f"{source_type.value} source has no single diff command",
        {'source_type': source_type.value}
    )


def build_pr_args(pr_info: PRInfo, selected_index: int | None = None) -> List[str]:
    """
    Build the git arguments for a whole pull request or one of its commits.

    Args:
        pr_info: Pull request with base/head OIDs and commits
        selected_index: 1-based index into pr_info.commits, or None for the whole PR

    Returns:
        Git command arguments

    Raises:
        DiffSourceError: If selected_index does not name a commit of the pull request
    """
    if selected_index is None:
        # Three-dot: changes introduced by head relative to the merge base
        return ["diff", f"{pr_info.base_oid}...{pr_info.head_oid}"]

    if selected_index < 1 or selected_index > len(pr_info.commits):
        raise DiffSourceError(
            f"Invalid commit index: {selected_index}",
            {
                'selected_index': selected_index,
                'commit_count': len(pr_info.commits),
                'pr_number': pr_info.number
            }
        )

    commit = pr_info.commits[selected_index - 1]
    parent = pr_info.base_oid if selected_index == 1 else pr_info.commits[selected_index - 2].oid
    return ["diff", f"{parent}..{commit.oid}"]


def format_file_count(file_count: int) -> str:
    """Format the file count suffix used in titles, e.g. " (3 files)"."""
    if file_count == 0:
        return " (empty)"

    if file_count == 1:
        return " (1 file)"

    return f" ({file_count} files)"


def build_title(source: DiffSource, file_count: int) -> str:
    """
    Build a human-readable title for a diff source.

    Args:
        source: The diff source
        file_count: Number of files in the diff

    Returns:
        Display title
    """
    suffix = format_file_count(file_count)
    source_type = source.type

    if source_type == DiffSourceType.STAGED:
        return "Diff staged" + suffix

    if source_type == DiffSourceType.UNSTAGED:
        return "Diff unstaged" + suffix

    if source_type == DiffSourceType.WORKTREE:
        return "Diff worktree" + suffix

    if source_type == DiffSourceType.COMMIT:
        short_ref = (source.ref or "unknown")[:7]
        return f"Commit {short_ref}{suffix}"

    if source_type == DiffSourceType.RANGE:
        return f"Diff {source.range or 'unknown'}{suffix}"

    if source_type == DiffSourceType.STASH:
        return f"Stash {source.ref or 'unknown'}{suffix}"

    if source_type == DiffSourceType.THREE_WAY:
        return "3-way HEAD|INDEX|WORKTREE" + suffix

    if source_type == DiffSourceType.MERGE:
        return "3-way OURS|BASE|THEIRS" + suffix

    pr_info = source.pr_info
    if pr_info is None:
        return "PR" + suffix

    if source.selected_commit is not None and 1 <= source.selected_commit <= len(pr_info.commits):
        commit = pr_info.commits[source.selected_commit - 1]
        return f"PR #{pr_info.number}: {commit.message_headline} ({commit.short_oid}){suffix}"

    return f"PR #{pr_info.number} {pr_info.title}{suffix}"


def _split_range(range_expr: str) -> tuple[str, str] | None:
    """Split "A...B" or "A..B" into its two refs."""
    for separator in ("...", ".."):
        left, sep, right = range_expr.partition(separator)
        if sep and left and right:
            return left, right

    return None


def ref_for_source(source: DiffSource, side: str) -> str:
    """
    Get the ref that yields a side's full file content for a diff source.

    "INDEX" and "WORKTREE" are pseudo-refs for the index and working tree;
    ":2:" and ":3:" are the ours/theirs merge stages.

    Args:
        source: The diff source
        side: "left", "mid" or "right"

    Returns:
        The ref to read file content from
    """
    source_type = source.type
    is_left = side == "left"

    if source_type == DiffSourceType.STAGED:
        return "HEAD" if is_left else "INDEX"

    if source_type == DiffSourceType.UNSTAGED:
        return "INDEX" if is_left else "WORKTREE"

    if source_type == DiffSourceType.WORKTREE:
        return "HEAD" if is_left else "WORKTREE"

    if source_type in (DiffSourceType.COMMIT, DiffSourceType.STASH):
        ref = source.ref or "HEAD"
        return f"{ref}^" if is_left else ref

    if source_type == DiffSourceType.RANGE:
        range_expr = source.range or ""
        refs = _split_range(range_expr)
        if refs is not None:
            return refs[0] if is_left else refs[1]

        return f"{range_expr}^" if is_left else range_expr

    if source_type == DiffSourceType.PR:
        pr_info = source.pr_info
        if pr_info is None:
            return "HEAD^" if is_left else "HEAD"

        if is_left:
            return pr_info.base_oid or pr_info.base_ref or "HEAD"

        return pr_info.head_oid or pr_info.head_ref or "HEAD"

    if source_type == DiffSourceType.THREE_WAY:
        if is_left:
            return "HEAD"

        return "INDEX" if side == "mid" else "WORKTREE"

    # Merge conflicts: ours | worktree file with markers | theirs
    if is_left:
        return ":2:"

    return "WORKTREE" if side == "mid" else ":3:"
