"""Registry of recently opened repositories, persisted as JSON."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import IOFailureError
from .models import Workspace

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class WorkspaceStore:
    path: Path
    _workspaces: list[Workspace] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self._workspaces = self._load()

    def all(self) -> list[Workspace]:
        """Workspaces, most recently opened first."""

        return sorted(self._workspaces, key=lambda ws: ws.last_opened, reverse=True)

    def get(self, workspace_id: str) -> Workspace | None:
        return next((ws for ws in self._workspaces if ws.id == workspace_id), None)

    def add(self, workspace_path: str | Path) -> Workspace:
        """Register ``workspace_path``, refreshing it if already known."""

        key = str(workspace_path)
        now = _now_ms()
        existing = next((ws for ws in self._workspaces if ws.path == key), None)
        workspace = Workspace(
            id=existing.id if existing else self._new_id(now),
            path=key,
            name=Path(key).name or key,
            last_opened=now,
        )
        if existing:
            self._workspaces = [workspace if ws is existing else ws for ws in self._workspaces]
        else:
            self._workspaces.append(workspace)
        self._save()
        return workspace

    def _new_id(self, now: int) -> str:
        taken = {ws.id for ws in self._workspaces}
        candidate = f"ws-{now}"
        while candidate in taken:
            now += 1
            candidate = f"ws-{now}"
        return candidate

    def remove(self, workspace_id: str) -> bool:
        before = len(self._workspaces)
        self._workspaces = [ws for ws in self._workspaces if ws.id != workspace_id]
        self._save()
        return len(self._workspaces) != before

    def find_by_path(self, workspace_path: str | Path) -> Workspace | None:
        key = str(workspace_path)
        return next((ws for ws in self._workspaces if ws.path == key), None)

    def touch(self, workspace_id: str) -> Workspace | None:
        existing = self.get(workspace_id)
        if existing is None:
            return None
        updated = Workspace(id=existing.id, path=existing.path, name=existing.name, last_opened=_now_ms())
        self._workspaces = [updated if ws is existing else ws for ws in self._workspaces]
        self._save()
        return updated

    def _load(self) -> list[Workspace]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return [
                Workspace(
                    id=str(item["id"]),
                    path=str(item["path"]),
                    name=str(item["name"]),
                    last_opened=int(item["lastOpened"]),
                )
                for item in raw
            ]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Failed to load workspaces from %s: %s", self.path, exc)
            return []

    def _save(self) -> None:
        payload = [ws.to_payload() for ws in self._workspaces]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as exc:
            raise IOFailureError(f"Failed to save workspaces to {self.path}: {exc}") from exc


__all__ = ["WorkspaceStore"]
