"""Enumerate the primary and linked worktrees of a repository."""

from __future__ import annotations

import logging

from . import git
from .models import Repository, Worktree

logger = logging.getLogger(__name__)


def head_shorthand(repo: Repository) -> str:
    """Short name of what HEAD resolves to; empty when HEAD is unborn.

    A detached HEAD is reported as ``HEAD``.
    """

    if git.rev_parse_commit(repo.root, "HEAD") is None:
        return ""
    ref = git.head_ref(repo.root)
    if ref is None:
        return "HEAD"
    for prefix in ("refs/heads/", "refs/remotes/", "refs/tags/", "refs/"):
        if ref.startswith(prefix):
            return ref[len(prefix):]
    return ref


def list_worktrees(repo: Repository) -> list[Worktree]:
    """Primary worktree first, then every linked worktree.

    Linked worktrees are reported with an empty branch name; their current
    branch is not resolved.
    """

    primary = Worktree(path=str(repo.workdir or repo.git_dir), branch=head_shorthand(repo))
    result = [primary]
    for raw in git.worktree_list(repo.root)[1:]:
        path = raw.get("path")
        if not path:
            continue
        result.append(Worktree(path=str(path), branch=""))
    logger.debug("Found %d linked worktrees", len(result) - 1)
    return result


__all__ = ["head_shorthand", "list_worktrees"]
