"""Best-effort filesystem helpers: directory sizing and tolerant reads.

Nothing in this module raises for filesystem trouble. Entries that cannot be
listed, stat'ed or read are skipped (logged at DEBUG) and contribute nothing
to the result.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

MAX_SIZE = 2**64 - 1


def saturating_add(left: int, right: int, maximum: int = MAX_SIZE) -> int:
    """Add two byte counts, clamping at ``maximum`` instead of growing past it."""

    return min(left + right, maximum)


def iter_entries(directory: Path) -> Iterator[os.DirEntry[str]]:
    """Yield the entries of ``directory``, skipping anything unreadable.

    A directory that cannot be opened yields nothing. An error raised while
    iterating ends the listing for that directory; entries already yielded
    stay counted.
    """

    try:
        scanner = os.scandir(directory)
    except OSError as exc:
        logger.debug("Skipping unreadable directory %s: %s", directory, exc)
        return
    with scanner:
        while True:
            try:
                entry = next(scanner)
            except StopIteration:
                return
            except OSError as exc:
                logger.debug("Stopped listing %s: %s", directory, exc)
                return
            yield entry


def size_of(directory: Path, skip_name: str | None = None) -> int:
    """Return the total byte size of regular files below ``directory``.

    ``skip_name`` excludes one direct child by exact name. Symlinks count
    with their own link size and are never followed. Missing or unreadable
    paths count as zero.
    """

    total = 0
    pending: list[tuple[Path, str | None]] = [(Path(directory), skip_name)]
    while pending:
        current, skip = pending.pop()
        for entry in iter_entries(current):
            if skip is not None and entry.name == skip:
                continue
            try:
                info = entry.stat(follow_symlinks=False)
            except OSError as exc:
                logger.debug("Skipping %s: %s", entry.path, exc)
                continue
            if stat.S_ISREG(info.st_mode) or stat.S_ISLNK(info.st_mode):
                total = saturating_add(total, info.st_size)
            elif stat.S_ISDIR(info.st_mode):
                pending.append((Path(entry.path), None))
    return total


def read_text_best_effort(path: Path) -> str | None:
    """Return the UTF-8 text of ``path``, or None when it cannot be read."""

    try:
        return Path(path).read_bytes().decode("utf-8", errors="replace")
    except OSError as exc:
        logger.debug("Could not read %s: %s", path, exc)
        return None


__all__ = ["MAX_SIZE", "saturating_add", "iter_entries", "size_of", "read_text_best_effort"]
