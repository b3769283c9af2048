"""Wire models for the HTTP API.

Field names are snake_case in Python and camelCase on the wire, matching
what the dashboard client polls for.
"""

from typing import ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gitdash.dashboard import (
    AheadMode,
    BranchList,
    CommitRecord,
    FileDelta,
    RepoSnapshot,
    UntrackedEntry,
)


class WireModel(BaseModel):
    model_config: ClassVar[ConfigDict] = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# =============================================================================
# Snapshot
# =============================================================================


class FileRow(WireModel):
    file: str
    additions: int = 0
    deletions: int = 0

    @classmethod
    def from_delta(cls, delta: FileDelta) -> Self:
        return cls(file=delta.path, additions=delta.additions, deletions=delta.deletions)


class UntrackedRow(WireModel):
    file: str

    @classmethod
    def from_entry(cls, entry: UntrackedEntry) -> Self:
        return cls(file=entry.path)


class CommitRow(WireModel):
    oid: str
    message: str
    ts: int
    additions: int = 0
    deletions: int = 0
    files: list[FileRow] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: CommitRecord) -> Self:
        return cls(
            oid=record.id,
            message=record.message,
            ts=record.timestamp_seconds,
            additions=record.additions,
            deletions=record.deletions,
            files=[FileRow.from_delta(f) for f in record.files],
        )


class CountsPayload(WireModel):
    staged: int = 0
    modified: int = 0
    untracked: int = 0
    ahead: int = 0
    behind: int = 0
    recent: int = 0


class MetaPayload(WireModel):
    ahead_mode: AheadMode = AheadMode.LOCAL
    upstream: str | None = None
    tracked_pending: list[str] = Field(default_factory=list)


class DetailsPayload(WireModel):
    staged: list[FileRow] = Field(default_factory=list)
    modified: list[FileRow] = Field(default_factory=list)
    untracked: list[UntrackedRow] = Field(default_factory=list)
    ahead: list[CommitRow] = Field(default_factory=list)
    behind: list[CommitRow] = Field(default_factory=list)
    recent: list[CommitRow] = Field(default_factory=list)


class RepoState(WireModel):
    """A repository snapshot as sent to the client."""

    repository: str
    repository_path: str
    branch: str
    counts: CountsPayload
    meta: MetaPayload
    details: DetailsPayload

    @classmethod
    def from_snapshot(cls, snapshot: RepoSnapshot) -> Self:
        counts = snapshot.counts
        details = snapshot.details
        return cls(
            repository=snapshot.repository_name,
            repository_path=str(snapshot.repository_path),
            branch=snapshot.branch_name,
            counts=CountsPayload(
                staged=counts.staged,
                modified=counts.modified,
                untracked=counts.untracked,
                ahead=counts.ahead,
                behind=counts.behind,
                recent=counts.recent,
            ),
            meta=MetaPayload(
                ahead_mode=snapshot.ahead_mode,
                upstream=snapshot.upstream_ref,
                tracked_pending=list(snapshot.tracked_pending),
            ),
            details=DetailsPayload(
                staged=[FileRow.from_delta(d) for d in details.staged],
                modified=[FileRow.from_delta(d) for d in details.modified],
                untracked=[UntrackedRow.from_entry(e) for e in details.untracked],
                ahead=[CommitRow.from_record(c) for c in details.ahead],
                behind=[CommitRow.from_record(c) for c in details.behind],
                recent=[CommitRow.from_record(c) for c in details.recent],
            ),
        )


# =============================================================================
# Responses
# =============================================================================


class MutationResponse(WireModel):
    ok: bool = True
    state: RepoState


class AddAllResponse(MutationResponse):
    added_untracked: int = 0


class UnstageAllResponse(MutationResponse):
    changed: int = 0


class PushResponse(MutationResponse):
    upstream_fallback: bool = False


class BranchesResponse(WireModel):
    branches: list[str]
    current: str

    @classmethod
    def from_branch_list(cls, branch_list: BranchList) -> Self:
        return cls(branches=list(branch_list.branches), current=branch_list.current)


class VersionResponse(WireModel):
    version: str


class HealthResponse(WireModel):
    status: str


class ErrorResponse(WireModel):
    error: str


# =============================================================================
# Requests
# =============================================================================


class CheckoutRequest(WireModel):
    branch: str = ""
    create: bool = False


class CommitRequest(WireModel):
    message: str = ""


class FileStageRequest(WireModel):
    file: str = ""
    stage: bool = True


class FileTrackRequest(WireModel):
    file: str = ""
    track: bool = True
