"""Rich display for the ``tools`` and ``call`` commands."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from collections.abc import Sequence

    from fbpages.tools.base import Failure, Success, ToolDescriptor

_DESCRIPTION_LEN = 80


def _truncate(text: str, limit: int = _DESCRIPTION_LEN) -> str:
    """Truncate text to *limit* characters with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + " ..."


def _hint_flags(descriptor: ToolDescriptor) -> str:
    hints = descriptor.hints
    flags = []
    if hints.read_only:
        flags.append("read-only")
    if hints.destructive:
        flags.append("[red]destructive[/red]")
    if hints.idempotent:
        flags.append("idempotent")
    if hints.open_world:
        flags.append("open-world")
    return ", ".join(flags)


class CatalogDisplay:
    """Rich rendering of the tool catalog and call results.

    Accepts an optional :class:`~rich.console.Console` for dependency
    injection in tests.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def show_tools(self, descriptors: Sequence[ToolDescriptor], *, verbose: bool = False) -> None:
        """Print the catalog as a table."""
        table = Table(title=f"{len(descriptors)} tools", title_style="bold")
        table.add_column("Tool", style="cyan", no_wrap=True)
        table.add_column("Required")
        table.add_column("Hints", style="dim")
        if verbose:
            table.add_column("Description")
        for d in descriptors:
            row = [d.name, ", ".join(d.required) or "-", _hint_flags(d)]
            if verbose:
                row.append(_truncate(d.description))
            table.add_row(*row)
        self._console.print(table)

    def show_success(self, result: Success) -> None:
        """Print a successful payload as JSON."""
        self._console.print_json(json.dumps(result.payload))

    def show_failure(self, failure: Failure) -> None:
        """Print a failure in a red panel."""
        self._console.print(
            Panel(
                Text(failure.describe()),
                title=f"[bold red]{failure.kind}[/bold red]",
                border_style="red",
            )
        )
