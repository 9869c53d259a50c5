"""Interactive prompt helpers built on InquirerPy."""

from __future__ import annotations

import sys
from typing import Any, Iterable, Sequence

from InquirerPy import inquirer
from InquirerPy.base.control import Choice

from .exceptions import UserAbort, ValidationError


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise ValidationError(
            "Interactive mode requires a TTY. Provide the missing arguments to run non-interactively."
        )


def fuzzy_select(message: str, choices: Sequence[Choice | str]) -> Any:
    _ensure_tty()
    if not choices:
        raise UserAbort("No options available for selection.")
    try:
        return inquirer.fuzzy(message=message, choices=list(choices)).execute()
    except KeyboardInterrupt as exc:  # pragma: no cover - user cancel
        raise UserAbort("User cancelled the prompt.") from exc


def build_choices(options: Iterable[str], *, highlight: Sequence[str] | None = None) -> list[Choice]:
    """Return Choice objects with highlighted entries placed first."""

    highlight = highlight or []
    result: list[Choice] = []
    seen: set[str] = set()
    for item in list(highlight) + list(options):
        if not item or item in seen:
            continue
        seen.add(item)
        name = f"{item} (current)" if item in highlight else item
        result.append(Choice(value=item, name=name))
    return result
