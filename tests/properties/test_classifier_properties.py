"""Property-based tests for status classification and divergence counting.

- Bucket membership follows the HEAD/index/workdir comparison rules
- Counts always equal the number of detail rows
- Pruned tracked-pending paths are a subset of the untracked paths
"""

from pathlib import Path
from tempfile import TemporaryDirectory

from hypothesis import given, strategies as st

from gitdash.backend import StatusRow
from gitdash.dashboard import (
    TrackedPendingStore,
    classify_status,
    count_divergence,
)

# =============================================================================
# Strategies
# =============================================================================

_PATH_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789-_"

paths = st.text(alphabet=_PATH_ALPHABET, min_size=1, max_size=12)
blob_ids = st.one_of(st.none(), st.sampled_from(["b1", "b2", "b3"]))

status_rows = st.dictionaries(
    paths, st.tuples(blob_ids, blob_ids, blob_ids), max_size=25
).map(
    lambda table: [
        StatusRow(path, head, index, workdir)
        for path, (head, index, workdir) in table.items()
    ]
)

# Commit ids shared by both walks, plus ids unique to each
commit_ids = st.lists(
    st.text(alphabet="0123456789abcdef", min_size=4, max_size=8),
    unique=True,
    max_size=20,
)


# =============================================================================
# Classification
# =============================================================================


@given(rows=status_rows, ignored=st.sets(paths, max_size=10))
def test_bucket_membership_matches_rules(
    rows: list[StatusRow], ignored: set[str]
) -> None:
    result = classify_status(rows, ignored.__contains__)

    staged = {row.path for row in result.staged}
    modified = {row.path for row in result.modified}
    untracked = {entry.path for entry in result.untracked}

    for row in rows:
        assert (row.path in staged) == (row.index != row.head)
        assert (row.path in modified) == (
            row.head is not None and row.workdir != row.index
        )
        assert (row.path in untracked) == (
            row.head is None
            and row.index is None
            and row.workdir is not None
            and row.path not in ignored
        )


@given(rows=status_rows)
def test_buckets_are_sorted(rows: list[StatusRow]) -> None:
    result = classify_status(rows, lambda _: False)

    for bucket in (result.staged, result.modified, result.untracked):
        bucket_paths = [item.path for item in bucket]
        assert bucket_paths == sorted(bucket_paths)


@given(rows=status_rows)
def test_untracked_never_staged_or_modified(rows: list[StatusRow]) -> None:
    result = classify_status(rows, lambda _: False)

    untracked = {entry.path for entry in result.untracked}
    assert untracked.isdisjoint(row.path for row in result.staged)
    assert untracked.isdisjoint(row.path for row in result.modified)


# =============================================================================
# Divergence
# =============================================================================


@given(shared=commit_ids, local_only=commit_ids, upstream_only=commit_ids)
def test_linear_divergence_is_exact(
    shared: list[str], local_only: list[str], upstream_only: list[str]
) -> None:
    taken = set(shared)
    local_only = [c for c in local_only if c not in taken]
    taken.update(local_only)
    upstream_only = [c for c in upstream_only if c not in taken]

    local = {c: i for i, c in enumerate([*local_only, *shared])}
    upstream = {c: i for i, c in enumerate([*upstream_only, *shared])}

    ahead, behind = count_divergence(local, upstream)

    if shared:
        assert (ahead, behind) == (len(local_only), len(upstream_only))
    else:
        assert (ahead, behind) == (0, 0)


# =============================================================================
# Tracked-pending prune
# =============================================================================


@given(
    recorded=st.sets(paths, max_size=10),
    untracked=st.sets(paths, max_size=10),
)
def test_prune_yields_subset_of_untracked(
    recorded: set[str], untracked: set[str]
) -> None:
    with TemporaryDirectory() as tmp:
        store = TrackedPendingStore(Path(tmp) / "gitdash.json")
        store.add(recorded)

        result = store.prune(untracked)

        assert result <= untracked
        assert result == recorded & untracked
        assert store.read() == result
