"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)
err_console = Console(theme=_THEME, stderr=True)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def columns_table(self, columns: Iterable[Any], title: str = "Columns") -> None:
        """
        Render catalog column definitions.

        Expects objects with `.name`, `.type` and optional `.comment`
        (like metasync.core.hms.FieldSchema).
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("Type")
        t.add_column("Comment", style="meta")

        for c in columns:
            t.add_row(str(c.name), str(c.type), str(getattr(c, "comment", "") or ""))

        console.print(t)

    def partitions_table(
        self,
        specs: Iterable[Any],
        keys: Sequence[str] | None = None,
        title: str = "Partitions",
    ) -> None:
        """
        Render partition previews.

        Expects objects with `.relative_path`, `.values` and `.location`
        (like metasync.core.partitions.PartitionSpec). Values are shown as
        `key=value` pairs when partition key names are known.
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Partition", style="ok")
        t.add_column("Values")
        t.add_column("Location", style="meta")

        for s in specs:
            if keys:
                values = ", ".join(f"{k}={v}" for k, v in zip(keys, s.values))
            else:
                values = ", ".join(s.values)
            t.add_row(str(s.relative_path), values, str(s.location))

        console.print(t)

    def names_table(self, names: Iterable[str], title: str = "Names") -> None:
        """Render a single-column table of names."""
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok")

        for n in names:
            t.add_row(str(n))

        console.print(t)


out = Out()
