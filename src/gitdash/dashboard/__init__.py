"""Repository-state aggregation and mutation engine."""

from ._classifier import classify_status, is_modified, is_staged, is_untracked_candidate
from ._dispatcher import MutationDispatcher, indicates_missing_upstream
from ._divergence import (
    DivergenceResolver,
    count_divergence,
    find_merge_base,
    index_commits,
    to_commit_record,
)
from ._enricher import DiffStatEnricher
from ._models import (
    DETACHED_BRANCH,
    UNKNOWN_BRANCH,
    AheadMode,
    BranchList,
    ClassifiedChanges,
    CommitRecord,
    Divergence,
    FileDelta,
    MutationResult,
    RepoSnapshot,
    SnapshotCounts,
    SnapshotDetails,
    SnapshotLimits,
    UntrackedEntry,
)
from ._numstat import LineStat, lookup_stat, parse_numstat, rename_target
from ._snapshot import SnapshotService
from ._tracked import ROOT_STATE_FILENAME, STATE_FILENAME, TrackedPendingStore

__all__ = [
    "DETACHED_BRANCH",
    "ROOT_STATE_FILENAME",
    "STATE_FILENAME",
    "UNKNOWN_BRANCH",
    "AheadMode",
    "BranchList",
    "ClassifiedChanges",
    "CommitRecord",
    "DiffStatEnricher",
    "Divergence",
    "DivergenceResolver",
    "FileDelta",
    "LineStat",
    "MutationDispatcher",
    "MutationResult",
    "RepoSnapshot",
    "SnapshotCounts",
    "SnapshotDetails",
    "SnapshotLimits",
    "SnapshotService",
    "TrackedPendingStore",
    "UntrackedEntry",
    "classify_status",
    "count_divergence",
    "find_merge_base",
    "index_commits",
    "indicates_missing_upstream",
    "is_modified",
    "is_staged",
    "is_untracked_candidate",
    "lookup_stat",
    "parse_numstat",
    "rename_target",
    "to_commit_record",
]
