"""Custom error hierarchy for git-repo-inspector."""

from __future__ import annotations


class InspectorError(RuntimeError):
    """Base error for all custom exceptions."""


class NotFoundError(InspectorError):
    """Raised when a repository, branch, commit or remote does not exist."""


class UnresolvableError(InspectorError):
    """Raised when HEAD cannot be resolved to a commit."""


class MalformedError(InspectorError):
    """Raised when an object id is not a valid hash."""


class IOFailureError(InspectorError):
    """Raised when access to the repository store fails."""


class GitCommandError(IOFailureError):
    """Raised when an underlying git command fails."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        *,
        stdout: str | None = None,
        stderr: str | None = None,
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        message = f"git command failed (exit {returncode}): {' '.join(command)}"
        details = "\n".join(
            section
            for section in (self.stdout.strip(), self.stderr.strip())
            if section
        )
        if details:
            message = f"{message}\n{details}"
        super().__init__(message)


class ValidationError(InspectorError):
    """Raised when user input fails validation."""


class UserAbort(InspectorError):
    """Raised when the user cancels an interactive flow."""


__all__ = [
    "InspectorError",
    "NotFoundError",
    "UnresolvableError",
    "MalformedError",
    "IOFailureError",
    "GitCommandError",
    "ValidationError",
    "UserAbort",
]
