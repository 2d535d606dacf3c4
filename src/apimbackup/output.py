"""Human-readable progress output for the CLI."""

from __future__ import annotations

import json
from typing import Any, Literal

from rich.console import Console

Level = Literal["info", "success", "warning", "error"]

_STYLES: dict[str, tuple[str, str]] = {
    "info": ("•", "cyan"),
    "success": ("✔", "green"),
    "warning": ("!", "yellow"),
    "error": ("✖", "bold red"),
}


def print_status(message: str, level: Level = "info", *, stderr: bool = False) -> None:
    """Print one progress line styled for ``level``.

    Errors always go to standard error; other levels go to standard output
    unless ``stderr`` is set. Service payloads may contain square brackets,
    so the message is never parsed as rich markup.
    """
    symbol, style = _STYLES.get(level, _STYLES["info"])
    console = Console(stderr=stderr or level == "error")
    console.print(
        f"{symbol} {message}",
        style=style,
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )


def print_json_document(document: dict[str, Any]) -> None:
    """Write a single machine-readable JSON document to standard output."""
    Console().print(
        json.dumps(document, indent=2),
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )
