"""Environment-driven settings for the command line."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ValidationError
from .history import DEFAULT_COMMIT_LIMIT

COMMIT_LIMIT_VAR = "GIT_INSPECT_COMMIT_LIMIT"
WORKSPACES_FILE_VAR = "GIT_INSPECT_WORKSPACES_FILE"
DEFAULT_WORKSPACES_FILE = Path("~/.gitgui/workspaces.json")


@dataclass(frozen=True)
class Settings:
    commit_limit: int
    workspaces_file: Path


def load_settings() -> Settings:
    return Settings(
        commit_limit=_positive_int(COMMIT_LIMIT_VAR, DEFAULT_COMMIT_LIMIT),
        workspaces_file=_path(WORKSPACES_FILE_VAR, DEFAULT_WORKSPACES_FILE),
    )


def _positive_int(var: str, default: int) -> int:
    raw = os.environ.get(var)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValidationError(f"Environment variable {var} must be an integer, got {raw!r}.") from exc
    if value <= 0:
        raise ValidationError(f"Environment variable {var} must be positive, got {value}.")
    return value


def _path(var: str, default: Path) -> Path:
    raw = os.environ.get(var)
    return Path(raw).expanduser() if raw else default.expanduser()


__all__ = ["Settings", "load_settings"]
