"""Parsing of ``git diff --numstat`` output."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

# "dir/{old => new}/file" with an optional empty side, e.g. "{ => sub}/f"
_BRACED_RENAME = re.compile(r"\{([^{}]*) => ([^{}]*)\}")
_PLAIN_RENAME = " => "


@dataclass(frozen=True, slots=True)
class LineStat:
    additions: int = 0
    deletions: int = 0


ZERO_STAT = LineStat()


def _to_count(value: str) -> int:
    # Binary files report "-"
    return int(value) if value.isdigit() else 0


def rename_target(path: str) -> str:
    """Destination path of a numstat rename entry.

    Example:
        >>> rename_target("src/{old => new}/app.py")
        'src/new/app.py'
        >>> rename_target("a.txt => b.txt")
        'b.txt'
    """
    if _BRACED_RENAME.search(path):
        return _BRACED_RENAME.sub(r"\2", path).replace("//", "/").lstrip("/")
    if _PLAIN_RENAME in path:
        return path.split(_PLAIN_RENAME, 1)[1]
    return path


def parse_numstat(raw: str) -> dict[str, LineStat]:
    """Parse numstat output into a path-to-stat map.

    Each line is ``<added>\\t<deleted>\\t<path>``. Lines with fewer than
    three fields are skipped, non-numeric counts become 0, and renames
    are keyed by their destination path.

    Example:
        >>> parse_numstat("3\\t1\\tsrc/app.py\\n-\\t-\\tlogo.png\\n")
        {'src/app.py': LineStat(additions=3, deletions=1), 'logo.png': LineStat(additions=0, deletions=0)}
    """
    stats: dict[str, LineStat] = {}
    for line in raw.splitlines():
        parts = line.split("\t")
        if len(parts) < 3:  # noqa: PLR2004
            continue
        path = rename_target("\t".join(parts[2:]))
        stats[path] = LineStat(_to_count(parts[0].strip()), _to_count(parts[1].strip()))
    return stats


def lookup_stat(stats: Mapping[str, LineStat], path: str) -> LineStat | None:
    """Find the stat for ``path``, tolerating path normalization differences.

    Tries an exact match first, then any key equal to ``./<path>`` or
    ending in ``/<path>``.
    """
    if path in stats:
        return stats[path]

    dotted = f"./{path}"
    suffix = f"/{path}"
    for key, stat in stats.items():
        if key == dotted or key.endswith(suffix):
            return stat
    return None
