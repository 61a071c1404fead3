"""
Terminal Output.

Stateless helpers every command uses to print results with Rich.
Server-supplied text is always wrapped in Text objects so it is never
interpreted as Rich markup.
"""

import json as jsonlib
from datetime import datetime
from typing import Any, Iterable, Literal, Sequence

import typer
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

Message = str | Text
Cell = str | int | float | Text

BADGE_STYLES = {
    "green": "black on green",
    "red": "white on red",
    "yellow": "black on yellow",
    "blue": "white on blue",
    "gray": "white on grey50",
}


def success(msg: Message) -> None:
    console.print(Text.assemble(("✓", "green"), " ", msg), soft_wrap=True)


def error(msg: Message) -> None:
    err_console.print(Text.assemble(("✗", "red"), " ", msg), soft_wrap=True)


def warn(msg: Message) -> None:
    console.print(Text.assemble(("⚠", "yellow"), " ", msg), soft_wrap=True)


def info(msg: Message) -> None:
    console.print(Text.assemble(("ℹ", "blue"), " ", msg), soft_wrap=True)


def blank() -> None:
    console.print()


def label(key: str, value: Any) -> None:
    """Print one dimmed ``key:`` followed by its value."""
    console.print(Text.assemble((f"{key}:", "dim"), " ", _as_text(value)), soft_wrap=True)


def header(title: str) -> None:
    """Print a bold section title underlined to its own length."""
    console.print()
    console.print(Text(title, style="bold cyan"))
    console.print(Text("─" * len(title), style="dim"))


def divider() -> None:
    console.print(Text("─" * 50, style="dim"))


def styled(value: Any, style: str) -> Text:
    """Wrap a value in a styled Text without markup parsing."""
    return Text(str(value), style=style)


def badge(text: str, color: Literal["green", "red", "yellow", "blue", "gray"]) -> Text:
    return Text(f" {text} ", style=BADGE_STYLES[color])


def status_badge(active: bool) -> Text:
    return badge("ACTIVE", "green") if active else badge("INACTIVE", "gray")


def tags(values: Iterable[str], style: str = "cyan", empty: str = "none") -> Text:
    """Render tags as ``#tag #tag``, or a dimmed placeholder when there are none."""
    rendered = [Text(f"#{value}", style=style) for value in values]
    if not rendered:
        return Text(empty, style="dim")
    return Text(" ").join(rendered)


def table(headers: Sequence[str], rows: Iterable[Sequence[Cell]]) -> None:
    """Render an aligned box-drawing table. Non-Text cells are stringified."""
    t = Table(box=box.SQUARE, header_style="cyan", border_style="dim")
    for heading in headers:
        t.add_column(heading)
    for row in rows:
        t.add_row(*(_as_text(cell) for cell in row))
    console.print(t)


def json(data: Any) -> None:
    """Print data as pretty JSON (2-space indent)."""
    typer.echo(jsonlib.dumps(data, indent=2, ensure_ascii=False))


def print_server_url(url: str) -> None:
    console.print(Text(f"Server: {url}", style="dim"))


def empty_state(message: str) -> None:
    """Print the neutral line used for successfully fetched, empty collections."""
    console.print(Text(f"  ({message})", style="dim"), soft_wrap=True)


def count(n: int, singular: str, plural: str | None = None) -> Text:
    """``3 entries`` / ``1 entry`` with the number in bold."""
    word = singular if n == 1 else (plural or singular + "s")
    return Text.assemble((str(n), "bold"), f" {word}")


def number(value: float | int) -> str:
    """Format a number without a trailing ``.0`` for whole values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def timestamp(value: str | None) -> str:
    """Render an ISO timestamp in local time; unparseable values pass through."""
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime("%Y-%m-%d %H:%M:%S")


def _as_text(value: Any) -> Text:
    if isinstance(value, Text):
        return value
    if isinstance(value, float):
        return Text(number(value))
    return Text(str(value))
