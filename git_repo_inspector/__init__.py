"""Top-level package for git-repo-inspector."""

import logging
from importlib import metadata

from .exceptions import (
    InspectorError,
    IOFailureError,
    MalformedError,
    NotFoundError,
    UnresolvableError,
)
from .service import RepositoryInspector

try:  # pragma: no cover - best effort metadata lookup
    __version__ = metadata.version("git-repo-inspector")
except metadata.PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "RepositoryInspector",
    "InspectorError",
    "IOFailureError",
    "MalformedError",
    "NotFoundError",
    "UnresolvableError",
]
