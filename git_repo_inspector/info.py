"""Aggregate structural facts and on-disk footprint of a repository."""

from __future__ import annotations

import logging
from pathlib import Path

from .fs import saturating_add, size_of
from .lfs import is_lfs_enabled
from .models import Repository, RepositoryInfo

logger = logging.getLogger(__name__)

METADATA_DIR_NAME = ".git"


def _metadata_child_name(repo: Repository) -> str:
    if repo.workdir is not None and repo.git_dir.parent == repo.workdir:
        return repo.git_dir.name
    return METADATA_DIR_NAME


def repo_info(repo: Repository, repo_path: str | Path) -> RepositoryInfo:
    git_dir = repo.git_dir
    worktree_path = repo.workdir or git_dir

    if repo.workdir is None:
        worktree_size = 0
    else:
        worktree_size = size_of(repo.workdir, _metadata_child_name(repo))
    metadata_size = size_of(git_dir)
    objects_size = size_of(git_dir / "objects")
    packfiles_size = size_of(git_dir / "objects" / "pack")
    refs_size = size_of(git_dir / "refs")
    lfs_objects_size = size_of(git_dir / "lfs" / "objects")
    lfs_enabled = is_lfs_enabled(repo, worktree_path, git_dir)
    logger.debug("Sized %s: worktree=%d metadata=%d", worktree_path, worktree_size, metadata_size)

    return RepositoryInfo(
        repo_path=str(repo_path),
        metadata_dir_path=str(git_dir),
        worktree_path=str(worktree_path),
        is_bare=repo.is_bare,
        total_size_bytes=saturating_add(worktree_size, metadata_size),
        worktree_size_bytes=worktree_size,
        metadata_size_bytes=metadata_size,
        objects_size_bytes=objects_size,
        packfiles_size_bytes=packfiles_size,
        refs_size_bytes=refs_size,
        lfs_enabled=lfs_enabled,
        lfs_objects_size_bytes=lfs_objects_size,
    )


__all__ = ["METADATA_DIR_NAME", "repo_info"]
