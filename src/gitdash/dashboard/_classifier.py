"""Status matrix classification.

Turns per-path HEAD/index/working-copy identities into the staged,
modified and untracked buckets. A path can land in both staged and
modified, for example when it was staged and then edited again.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gitdash.dashboard._models import ClassifiedChanges, FileDelta, UntrackedEntry

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from gitdash.backend import StatusRow


def is_staged(row: StatusRow) -> bool:
    """Index differs from HEAD (added, staged edit or staged deletion)."""
    return row.index != row.head


def is_modified(row: StatusRow) -> bool:
    """Tracked in HEAD and the working copy differs from the index."""
    return row.head is not None and row.workdir != row.index


def is_untracked_candidate(row: StatusRow) -> bool:
    """Only present in the working copy; still subject to ignore rules."""
    return row.head is None and row.index is None and row.workdir is not None


def classify_status(
    rows: Iterable[StatusRow],
    is_ignored: Callable[[str], bool],
) -> ClassifiedChanges:
    """Sort status rows into buckets.

    ``is_ignored`` is consulted only for untracked candidates, so tracked
    paths never pay for ignore-rule evaluation.

    Args:
        rows: Status matrix rows.
        is_ignored: Ignore-rule predicate for repository-relative paths.

    Returns:
        Buckets sorted by path, with zero diff statistics.
    """
    staged: list[FileDelta] = []
    modified: list[FileDelta] = []
    untracked: list[UntrackedEntry] = []

    for row in sorted(rows, key=lambda r: r.path):
        if is_staged(row):
            staged.append(FileDelta(row.path))
        if is_modified(row):
            modified.append(FileDelta(row.path))
        if is_untracked_candidate(row) and not is_ignored(row.path):
            untracked.append(UntrackedEntry(row.path))

    return ClassifiedChanges(
        staged=tuple(staged),
        modified=tuple(modified),
        untracked=tuple(untracked),
    )
