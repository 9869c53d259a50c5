"""Shared fixtures: throw-away git repositories in temporary directories."""

from __future__ import annotations

import os
import subprocess
import tempfile
import unittest
from pathlib import Path
from unittest import mock


class GitRepoTestCase(unittest.TestCase):
    """Creates an isolated sandbox with a non-bare repository at ``self.repo``."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.sandbox = Path(self._tmp.name).resolve()
        home = self.sandbox / "home"
        home.mkdir()
        env = {
            "HOME": str(home),
            "XDG_CONFIG_HOME": str(home / ".config"),
            "GIT_CONFIG_NOSYSTEM": "1",
            "GIT_CEILING_DIRECTORIES": str(self.sandbox),
            "GIT_AUTHOR_NAME": "Test Author",
            "GIT_AUTHOR_EMAIL": "author@example.com",
            "GIT_COMMITTER_NAME": "Test Author",
            "GIT_COMMITTER_EMAIL": "author@example.com",
        }
        patcher = mock.patch.dict(os.environ, env)
        patcher.start()
        self.addCleanup(patcher.stop)
        for var in ("GIT_DIR", "GIT_WORK_TREE", "GIT_INDEX_FILE"):
            os.environ.pop(var, None)
        self.repo = self.init_repo(self.sandbox / "repo")

    def git(self, *args: str, cwd: Path | None = None) -> str:
        proc = subprocess.run(
            ["git", *args],
            cwd=str(cwd or self.repo),
            capture_output=True,
            text=True,
            check=True,
        )
        return proc.stdout.strip()

    def init_repo(self, path: Path, *, bare: bool = False) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        args = ["init", "--quiet", "--initial-branch=main"]
        if bare:
            args.append("--bare")
        self.git(*args, cwd=path)
        return path

    def write(self, relative: str, content: str | bytes) -> Path:
        target = self.repo / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            target.write_bytes(content)
        else:
            target.write_bytes(content.encode("utf-8"))
        return target

    def commit_file(self, relative: str, content: str | bytes, message: str | None = None) -> str:
        self.write(relative, content)
        self.git("add", "--", relative)
        self.git("commit", "--quiet", "-m", message or f"update {relative}")
        return self.head()

    def head(self) -> str:
        return self.git("rev-parse", "HEAD")
