"""Path-based facade: one call per query, each on a freshly opened repository."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from . import history, info, refs, status, worktrees
from .models import (
    Branch,
    Commit,
    CommitChange,
    FileDiffPair,
    Remote,
    RepositoryInfo,
    WorkingStatus,
    Worktree,
)
from .repository import open_repository


@dataclass(frozen=True)
class RepositoryInspector:
    """Answers structural questions about the repository containing ``repo_path``.

    Nothing is cached between calls; every method discovers the repository
    again, so instances are cheap and safe to share between threads.
    """

    repo_path: str | Path

    def branches(self) -> list[Branch]:
        return refs.list_branches(open_repository(self.repo_path))

    def remotes(self) -> list[Remote]:
        return refs.list_remotes(open_repository(self.repo_path))

    def commits(self, limit: int = history.DEFAULT_COMMIT_LIMIT) -> list[Commit]:
        return history.list_commits(open_repository(self.repo_path), limit)

    def commit_changes(self, commit_hash: str, *, detect_renames: bool = False) -> list[CommitChange]:
        repo = open_repository(self.repo_path)
        return history.commit_changes(repo, commit_hash, detect_renames=detect_renames)

    def commit_file_diff(self, commit_hash: str, file_path: str) -> FileDiffPair:
        return history.commit_file_diff(open_repository(self.repo_path), commit_hash, file_path)

    def status(self, *, include_index: bool = False) -> list[WorkingStatus]:
        return status.working_status(open_repository(self.repo_path), include_index=include_index)

    def worktrees(self) -> list[Worktree]:
        return worktrees.list_worktrees(open_repository(self.repo_path))

    def checkout(self, branch_name: str) -> None:
        refs.checkout_branch(open_repository(self.repo_path), branch_name)

    def info(self) -> RepositoryInfo:
        return info.repo_info(open_repository(self.repo_path), self.repo_path)


__all__ = ["RepositoryInspector"]
