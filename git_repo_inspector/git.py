"""Thin wrappers around git CLI commands."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Sequence

from .exceptions import GitCommandError

logger = logging.getLogger(__name__)


def run_git(
    args: Sequence[str],
    *,
    cwd: Path,
    check: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Execute a git command and optionally raise on failure.

    Output is decoded as UTF-8 with invalid sequences replaced; line endings
    are left untouched.
    """

    result = run_git_bytes(args, cwd=cwd, check=check)
    return subprocess.CompletedProcess(
        result.args,
        result.returncode,
        _decode(result.stdout),
        _decode(result.stderr),
    )


def run_git_bytes(
    args: Sequence[str],
    *,
    cwd: Path,
    check: bool = True,
) -> subprocess.CompletedProcess[bytes]:
    command = ["git", *args]
    logger.debug("Running %s in %s", " ".join(command), cwd)
    try:
        result = subprocess.run(
            command,
            cwd=str(cwd),
            capture_output=True,
            check=False,
        )
    except OSError as exc:
        raise GitCommandError(command, -1, stderr=str(exc)) from exc
    if check and result.returncode != 0:
        raise GitCommandError(
            command,
            result.returncode,
            stdout=_decode(result.stdout),
            stderr=_decode(result.stderr),
        )
    return result


def _decode(raw: bytes | None) -> str:
    return (raw or b"").decode("utf-8", errors="replace")


def rev_parse_commit(path: Path, rev: str) -> str | None:
    """Return the full object id of ``rev`` peeled to a commit, if any."""

    proc = run_git(["rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"], cwd=path, check=False)
    if proc.returncode != 0:
        return None
    return proc.stdout.strip() or None


def object_ids_with_prefix(path: Path, prefix: str) -> list[str]:
    """Full ids of every object whose id starts with ``prefix``.

    Only the object database is consulted; ref names never match.
    """

    proc = run_git(["rev-parse", f"--disambiguate={prefix}"], cwd=path, check=False)
    if proc.returncode != 0:
        return []
    return proc.stdout.split()


def branch_exists(path: Path, branch: str) -> bool:
    proc = run_git(
        ["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"],
        cwd=path,
        check=False,
    )
    return proc.returncode == 0


def head_ref(path: Path) -> str | None:
    proc = run_git(["symbolic-ref", "-q", "HEAD"], cwd=path, check=False)
    if proc.returncode == 0:
        return proc.stdout.strip()
    return None


def config_get(path: Path, key: str) -> str | None:
    proc = run_git(["config", "--get", key], cwd=path, check=False)
    if proc.returncode != 0:
        return None
    return proc.stdout.rstrip("\n")


def cat_blob(path: Path, object_id: str) -> bytes:
    return run_git_bytes(["cat-file", "blob", object_id], cwd=path).stdout


def worktree_list(path: Path) -> list[dict]:
    """Parse ``git worktree list --porcelain`` into one dict per worktree."""

    proc = run_git(["worktree", "list", "--porcelain"], cwd=path)
    items: list[dict] = []
    current: dict | None = None
    for raw_line in proc.stdout.splitlines():
        line = raw_line.rstrip("\r")
        if not line:
            continue
        key, _, value = line.partition(" ")
        if key == "worktree":
            if current:
                items.append(current)
            current = {"path": Path(value)}
        elif not current:
            continue
        elif key == "branch":
            branch = value
            if branch.startswith("refs/heads/"):
                branch = branch[len("refs/heads/"):]
            current["branch"] = branch
        elif key == "HEAD":
            current["head"] = value
        elif key == "bare":
            current["bare"] = True
        elif key == "locked":
            current["locked"] = True
        elif key == "prunable":
            current["prunable"] = True
        elif key == "detached":
            current["branch"] = None
    if current:
        items.append(current)
    return items


__all__ = [
    "run_git",
    "run_git_bytes",
    "rev_parse_commit",
    "object_ids_with_prefix",
    "branch_exists",
    "head_ref",
    "config_get",
    "cat_blob",
    "worktree_list",
]
