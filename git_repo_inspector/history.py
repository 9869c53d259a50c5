"""Commit history: walking ancestry and diffing a commit against its parent."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from . import git
from .exceptions import IOFailureError, MalformedError, NotFoundError, UnresolvableError, ValidationError
from .models import ChangeKind, Commit, CommitChange, FileDiffPair, Repository

logger = logging.getLogger(__name__)

DEFAULT_COMMIT_LIMIT = 50

# with -z every field of every commit ends in NUL
_LOG_FIELDS = 5
_LOG_FORMAT = "%x00".join(["%H", "%P", "%an", "%at", "%B"])

_HASH_RE = re.compile(r"[0-9a-fA-F]{4,64}")
_FULL_HASH_LENGTHS = (40, 64)
_GITLINK_MODE = "160000"

_STATUS_KINDS = {
    "A": ChangeKind.ADDED,
    "D": ChangeKind.DELETED,
    "M": ChangeKind.MODIFIED,
    "R": ChangeKind.RENAMED,
    "C": ChangeKind.COPIED,
    "T": ChangeKind.TYPECHANGE,
}


@dataclass(frozen=True)
class _Delta:
    """One raw diff-tree row; a missing side has ``None`` object id."""

    kind: ChangeKind
    old_path: str
    new_path: str
    old_mode: str
    new_mode: str
    old_id: str | None
    new_id: str | None


def list_commits(repo: Repository, limit: int = DEFAULT_COMMIT_LIMIT) -> list[Commit]:
    """Walk ancestors of HEAD, most recent first, stopping after ``limit``."""

    if limit <= 0:
        raise ValidationError(f"Commit limit must be positive, got {limit}.")
    head = git.rev_parse_commit(repo.root, "HEAD")
    if head is None:
        raise UnresolvableError("HEAD does not point at a commit (unborn branch?)")
    proc = git.run_git(
        ["log", "-z", "--date-order", "--no-color", f"--max-count={limit}", f"--format={_LOG_FORMAT}", head],
        cwd=repo.root,
    )
    tokens = proc.stdout.split("\0")
    if len(tokens) % _LOG_FIELDS == 1 and not tokens[-1]:
        tokens.pop()
    if len(tokens) % _LOG_FIELDS:
        raise IOFailureError(f"unexpected git log output: {len(tokens)} fields")
    commits: list[Commit] = []
    for start in range(0, len(tokens), _LOG_FIELDS):
        object_id, parents, author, timestamp, message = tokens[start : start + _LOG_FIELDS]
        object_id = object_id.strip()
        commits.append(
            Commit(
                hash=object_id,
                author=author,
                date=timestamp,
                message=message.strip(),
                parents=tuple(parents.split()),
            )
        )
    logger.debug("Walked %d commits from %s", len(commits), head)
    return commits


def resolve_commit(repo: Repository, commit_hash: str) -> str:
    """Return the full id for ``commit_hash`` or raise if it is not a commit.

    The value is only ever matched against object ids, so a branch or tag
    whose name looks like hex cannot redirect it. An abbreviation must pick
    out exactly one commit.
    """

    if not _HASH_RE.fullmatch(commit_hash or ""):
        raise MalformedError(f"unable to parse OID - not a valid hash: '{commit_hash}'")
    prefix = commit_hash.lower()
    if len(prefix) in _FULL_HASH_LENGTHS:
        object_id = git.rev_parse_commit(repo.root, prefix)
        if object_id is None:
            raise NotFoundError(f"commit {commit_hash} not found in repository")
        return object_id
    matches: set[str] = set()
    for candidate in git.object_ids_with_prefix(repo.root, prefix):
        peeled = git.rev_parse_commit(repo.root, candidate)
        if peeled is not None:
            matches.add(peeled)
    if not matches:
        raise NotFoundError(f"commit {commit_hash} not found in repository")
    if len(matches) > 1:
        raise NotFoundError(f"commit {commit_hash} is ambiguous: {len(matches)} commits match")
    return matches.pop()


def first_parent(repo: Repository, object_id: str) -> str | None:
    proc = git.run_git(["rev-list", "--parents", "-n", "1", object_id], cwd=repo.root)
    ids = proc.stdout.split()
    return ids[1] if len(ids) > 1 else None


def _diff_tree(
    repo: Repository,
    object_id: str,
    *,
    path: str | None = None,
    detect_renames: bool = False,
) -> list[_Delta]:
    parent = first_parent(repo, object_id)
    args = ["diff-tree", "-r", "-z", "--no-commit-id"]
    args.append("-M" if detect_renames else "--no-renames")
    if parent is None:
        args += ["--root", object_id]
    else:
        args += [parent, object_id]
    if path is not None:
        args += ["--", path]
    proc = git.run_git(args, cwd=repo.root)
    return _parse_raw_diff(proc.stdout)


def _parse_raw_diff(output: str) -> list[_Delta]:
    tokens = output.split("\0")
    deltas: list[_Delta] = []
    index = 0
    while index < len(tokens):
        meta = tokens[index]
        index += 1
        if not meta.startswith(":"):
            continue
        old_mode, new_mode, old_id, new_id, status = meta[1:].split(" ", 4)
        code = status[:1]
        old_path = tokens[index]
        index += 1
        if code in ("R", "C"):
            new_path = tokens[index]
            index += 1
        else:
            new_path = old_path
        deltas.append(
            _Delta(
                kind=_STATUS_KINDS.get(code, ChangeKind.UNKNOWN),
                old_path=old_path,
                new_path=new_path,
                old_mode=old_mode,
                new_mode=new_mode,
                old_id=None if set(old_id) == {"0"} else old_id,
                new_id=None if set(new_id) == {"0"} else new_id,
            )
        )
    return deltas


def commit_changes(repo: Repository, commit_hash: str, *, detect_renames: bool = False) -> list[CommitChange]:
    """Paths touched by a commit relative to its first parent.

    A root commit is compared with the empty tree, so every path is added.
    """

    object_id = resolve_commit(repo, commit_hash)
    return [
        CommitChange(path=delta.new_path or delta.old_path, status=delta.kind)
        for delta in _diff_tree(repo, object_id, detect_renames=detect_renames)
    ]


def _read_side(repo: Repository, object_id: str | None, mode: str) -> str:
    if object_id is None or mode == _GITLINK_MODE:
        return ""
    return git.cat_blob(repo.root, object_id).decode("utf-8", errors="replace")


def commit_file_diff(repo: Repository, commit_hash: str, file_path: str) -> FileDiffPair:
    """Full text of ``file_path`` before and after a commit.

    A side on which the path does not exist comes back as an empty string;
    an unknown commit still raises.
    """

    object_id = resolve_commit(repo, commit_hash)
    deltas = _diff_tree(repo, object_id, path=file_path)
    if not deltas:
        return FileDiffPair(original="", modified="")
    delta = deltas[0]
    return FileDiffPair(
        original=_read_side(repo, delta.old_id, delta.old_mode),
        modified=_read_side(repo, delta.new_id, delta.new_mode),
    )


__all__ = [
    "DEFAULT_COMMIT_LIMIT",
    "list_commits",
    "resolve_commit",
    "first_parent",
    "commit_changes",
    "commit_file_diff",
]
