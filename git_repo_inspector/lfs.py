"""Heuristic detection of large-file storage (git-lfs)."""

from __future__ import annotations

from pathlib import Path

from .fs import read_text_best_effort
from .git import config_get
from .models import Repository

LFS_FILTER_MARKER = "filter=lfs"
LFS_CONFIG_KEYS = ("filter.lfs.clean", "filter.lfs.smudge")


def contains_lfs_filter(path: Path) -> bool:
    """True when the attributes file at ``path`` mentions the lfs filter."""

    content = read_text_best_effort(path)
    return content is not None and LFS_FILTER_MARKER in content


def lfs_configured(repo: Repository) -> bool:
    return any(config_get(repo.root, key) is not None for key in LFS_CONFIG_KEYS)


def is_lfs_enabled(repo: Repository, worktree_path: Path, git_dir: Path) -> bool:
    """Advisory check: lfs filter config, or an attributes file routing to it."""

    if lfs_configured(repo):
        return True
    if contains_lfs_filter(worktree_path / ".gitattributes"):
        return True
    return contains_lfs_filter(git_dir / "info" / "attributes")


__all__ = ["LFS_FILTER_MARKER", "contains_lfs_filter", "lfs_configured", "is_lfs_enabled"]
