"""Version-control backend port and its implementations."""

from ._dulwich import DulwichBackend
from ._fake import FakeBackend
from ._models import UNHASHED_WORKDIR, CommandResult, CommitEntry, StatusRow
from ._protocol import BackendProtocol

__all__ = [
    "UNHASHED_WORKDIR",
    "BackendProtocol",
    "CommandResult",
    "CommitEntry",
    "DulwichBackend",
    "FakeBackend",
    "StatusRow",
]
