"""Resolve a filesystem path to the repository that contains it."""

from __future__ import annotations

import logging
from pathlib import Path

from .exceptions import NotFoundError
from .git import run_git
from .models import Repository

logger = logging.getLogger(__name__)


def open_repository(path: str | Path) -> Repository:
    """Discover the repository containing ``path`` by walking upward.

    ``path`` may name a directory anywhere inside the repository or a file
    inside it, in which case discovery starts from its parent directory.
    """

    candidate = Path(path).expanduser()
    start = candidate.parent if candidate.is_file() else candidate
    logger.debug("Opening repository at: %s", start)
    if not start.is_dir():
        raise NotFoundError(f"could not find repository at '{path}'")

    proc = run_git(
        ["rev-parse", "--absolute-git-dir", "--is-bare-repository", "--is-inside-work-tree"],
        cwd=start,
        check=False,
    )
    lines = proc.stdout.splitlines()
    if proc.returncode != 0 or len(lines) < 3:
        raise NotFoundError(f"could not find repository at '{path}'")
    git_dir = Path(lines[0])
    is_bare, inside_worktree = lines[1] == "true", lines[2] == "true"

    workdir: Path | None = None
    if not is_bare:
        # From inside the metadata directory the work tree lies above it.
        toplevel_cwd = start if inside_worktree else git_dir.parent
        toplevel = run_git(["rev-parse", "--show-toplevel"], cwd=toplevel_cwd, check=False)
        if toplevel.returncode == 0 and toplevel.stdout.strip():
            workdir = Path(toplevel.stdout.strip())

    repo = Repository(git_dir=git_dir, workdir=workdir)
    logger.debug("Successfully opened repository (git dir %s, bare=%s)", git_dir, repo.is_bare)
    return repo


__all__ = ["open_repository"]
