"""Branches, remotes, and switching the checked-out branch."""

from __future__ import annotations

import logging

from . import git
from .exceptions import NotFoundError
from .models import Branch, Remote, Repository

logger = logging.getLogger(__name__)

_LOCAL_PREFIX = "refs/heads/"
_REMOTE_PREFIX = "refs/remotes/"


def list_branches(repo: Repository) -> list[Branch]:
    """Local branches first, then remote-tracking ones, in store order."""

    proc = git.run_git(
        ["for-each-ref", "--format=%(HEAD)%00%(refname)", _LOCAL_PREFIX, _REMOTE_PREFIX],
        cwd=repo.root,
    )
    local: list[Branch] = []
    remote: list[Branch] = []
    for line in proc.stdout.splitlines():
        marker, _, refname = line.partition("\0")
        if refname.startswith(_LOCAL_PREFIX):
            name = refname[len(_LOCAL_PREFIX):]
            local.append(Branch(name=name, is_current=marker == "*", is_remote=False))
        elif refname.startswith(_REMOTE_PREFIX):
            name = refname[len(_REMOTE_PREFIX):]
            remote.append(Branch(name=name, is_current=False, is_remote=True))
    logger.debug("Found %d local and %d remote branches", len(local), len(remote))
    return local + remote


def list_remotes(repo: Repository) -> list[Remote]:
    """Configured remotes that have a URL; the rest are skipped."""

    proc = git.run_git(["remote"], cwd=repo.root)
    remotes: list[Remote] = []
    for raw in proc.stdout.splitlines():
        name = raw.strip()
        if not name:
            continue
        url = git.config_get(repo.root, f"remote.{name}.url")
        if not url:
            logger.debug("Skipping remote %s without a URL", name)
            continue
        remotes.append(Remote(name=name, url=url))
    return remotes


def checkout_branch(repo: Repository, branch_name: str) -> None:
    """Update the working tree to ``branch_name`` and point HEAD at it.

    No stash or merge handling: git refuses the switch when local changes
    would be overwritten, and that failure is raised as-is.
    """

    if not branch_name or not git.branch_exists(repo.root, branch_name):
        raise NotFoundError(f"cannot locate local branch '{branch_name}'")
    logger.debug("Checking out %s%s", _LOCAL_PREFIX, branch_name)
    git.run_git(["checkout", "--quiet", branch_name, "--"], cwd=repo.root)


__all__ = ["list_branches", "list_remotes", "checkout_branch"]
