"""Working-tree status classification."""

from __future__ import annotations

import logging

from .exceptions import NotFoundError
from .git import run_git
from .models import Repository, StatusKind, WorkingStatus

logger = logging.getLogger(__name__)

# porcelain v2 single-letter codes, index side (X) and worktree side (Y)
_NEW_CODES = frozenset("A?")
_MODIFIED_CODES = frozenset("M")
_DELETED_CODES = frozenset("D")


def classify(index_code: str, worktree_code: str) -> StatusKind:
    """Collapse the two status codes of an entry into one kind.

    Precedence is new, then modified, then deleted; anything else (type
    changes, renames, conflicts) is unknown.
    """

    codes = {index_code, worktree_code}
    if codes & _NEW_CODES:
        return StatusKind.NEW
    if codes & _MODIFIED_CODES:
        return StatusKind.MODIFIED
    if codes & _DELETED_CODES:
        return StatusKind.DELETED
    return StatusKind.UNKNOWN


def working_status(repo: Repository, *, include_index: bool = False) -> list[WorkingStatus]:
    """Classify every changed or untracked path in the working tree.

    Ignored files are left out and renames are reported as a deletion plus
    an addition. By default only the comparison between the index and the
    working tree is considered; ``include_index`` adds staged changes.
    """

    if repo.workdir is None:
        raise NotFoundError("cannot get status of a bare repository: no working tree")
    proc = run_git(
        ["--no-optional-locks", "status", "--porcelain=v2", "-z", "--no-renames", "--untracked-files=normal"],
        cwd=repo.workdir,
    )
    tokens = proc.stdout.split("\0")
    result: list[WorkingStatus] = []
    index = 0
    while index < len(tokens):
        record = tokens[index]
        index += 1
        if not record:
            continue
        kind = record[0]
        if kind == "?":
            index_code, worktree_code, path = ".", "?", record[2:]
        elif kind == "1":
            parts = record.split(" ", 8)
            index_code, worktree_code, path = parts[1][0], parts[1][1], parts[8]
        elif kind == "2":
            parts = record.split(" ", 9)
            index_code, worktree_code, path = parts[1][0], parts[1][1], parts[9]
            index += 1  # original path follows as its own token
        elif kind == "u":
            parts = record.split(" ", 10)
            index_code, worktree_code, path = "U", "U", parts[10]
        else:
            continue
        if not include_index:
            if worktree_code == ".":
                continue
            index_code = "."
        result.append(WorkingStatus(path=path, status=classify(index_code, worktree_code)))
    logger.debug("Status found %d entries", len(result))
    return result


__all__ = ["classify", "working_status"]
