"""Dataclasses shared across modules."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class _Payload:
    """Mixin rendering a dataclass as a camelCase dict for UI consumers."""

    def to_payload(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for field in fields(self):  # type: ignore[arg-type]
            value = getattr(self, field.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, Path):
                value = str(value)
            elif isinstance(value, tuple):
                value = list(value)
            data[_camel(field.name)] = value
        return data


@dataclass(frozen=True)
class Repository:
    """An opened repository: its metadata directory and working tree."""

    git_dir: Path
    workdir: Path | None

    @property
    def is_bare(self) -> bool:
        return self.workdir is None

    @property
    def root(self) -> Path:
        """Directory git commands run from."""

        return self.workdir or self.git_dir


@dataclass(frozen=True)
class Branch(_Payload):
    name: str
    is_current: bool
    is_remote: bool


@dataclass(frozen=True)
class Remote(_Payload):
    name: str
    url: str


@dataclass(frozen=True)
class Commit(_Payload):
    """A single commit; ``date`` is the author time in epoch seconds."""

    hash: str
    author: str
    date: str
    message: str
    parents: tuple[str, ...]


class ChangeKind(str, Enum):
    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    COPIED = "copied"
    TYPECHANGE = "typechange"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CommitChange(_Payload):
    path: str
    status: ChangeKind


@dataclass(frozen=True)
class FileDiffPair(_Payload):
    original: str
    modified: str


class StatusKind(str, Enum):
    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class WorkingStatus(_Payload):
    path: str
    status: StatusKind


@dataclass(frozen=True)
class Worktree(_Payload):
    """A checkout of the repository; ``branch`` is empty when unknown."""

    path: str
    branch: str


@dataclass(frozen=True)
class RepositoryInfo(_Payload):
    """Structural summary of a repository and its on-disk footprint."""

    repo_path: str
    metadata_dir_path: str
    worktree_path: str
    is_bare: bool
    total_size_bytes: int
    worktree_size_bytes: int
    metadata_size_bytes: int
    objects_size_bytes: int
    packfiles_size_bytes: int
    refs_size_bytes: int
    lfs_enabled: bool
    lfs_objects_size_bytes: int


@dataclass(frozen=True)
class Workspace(_Payload):
    id: str
    path: str
    name: str
    last_opened: int
