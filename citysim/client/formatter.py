import io
from typing import Iterable, Sequence, Tuple

from rich.console import Console, RenderableType
from rich.table import Table
from rich.text import Text

from citysim.shared.events import (
    TAG_CRITICAL,
    TAG_ECONOMIC_CRISIS,
    TAG_EPIDEMIC,
    TAG_FIRE,
    TAG_GRANT,
    TAG_WARNING,
)

REPORT_WIDTH = 100

# First matching tag wins, so the severity tags come first.
EVENT_STYLES: Tuple[Tuple[str, str], ...] = (
    (TAG_CRITICAL, "bold red"),
    (TAG_WARNING, "yellow"),
    (TAG_FIRE, "red"),
    (TAG_EPIDEMIC, "magenta"),
    (TAG_ECONOMIC_CRISIS, "red"),
    (TAG_GRANT, "green"),
)


def make_console(file=None) -> Console:
    return Console(file=file, highlight=False)


def key_value_table(title: str, rows: Iterable[Tuple[str, object]]) -> Table:
    """Two-column table (label, value) used for the stat blocks."""
    table = Table(title=title, show_header=False, title_style="bold", min_width=40)
    table.add_column("Key", style="bold")
    table.add_column("Value", justify="right")
    for key, value in rows:
        table.add_row(Text(str(key)), Text(str(value)))
    return table


def data_table(title: str, headers: Sequence[str], rows: Iterable[Sequence[object]]) -> Table:
    table = Table(title=title, title_style="bold", min_width=40)
    for i, header in enumerate(headers):
        table.add_column(header, justify="left" if i == 0 else "right")
    for row in rows:
        table.add_row(*(Text(str(cell)) for cell in row))
    return table


def event_style(entry: str) -> str:
    for tag, style in EVENT_STYLES:
        if tag in entry:
            return style
    return ""


def event_lines(title: str, entries: Sequence[str], empty: str = "No events yet.") -> Table:
    """
    Single-column table of log entries, coloured by their tag.
    """
    table = Table(title=title, show_header=False, title_style="bold", min_width=40)
    table.add_column("Event", overflow="fold")
    if not entries:
        table.add_row(Text(empty, style="dim"))
    for entry in entries:
        table.add_row(Text(entry, style=event_style(entry)))
    return table


def render_text(*renderables: RenderableType, width: int = REPORT_WIDTH) -> str:
    """
    Renders to plain text (no colour codes). Used by tests and non-tty output.
    """
    buffer = io.StringIO()
    console = Console(file=buffer, width=width, color_system=None, force_terminal=False, highlight=False)
    for renderable in renderables:
        console.print(renderable)
    return buffer.getvalue()
