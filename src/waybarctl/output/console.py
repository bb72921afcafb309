"""Rich Console factory and theme for waybarctl output.

Consoles render into a StringIO buffer so renderers keep a plain
``-> str`` contract. Outside a terminal (tests, pipes) Rich drops color
codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

WB_THEME = Theme(
    {
        "wb.ok": "bold green",
        "wb.error": "bold red",
        "wb.warning": "bold yellow",
        "wb.op": "bold cyan",
        "wb.key": "dim",
        "wb.id": "blue",
        "wb.native": "bold magenta",
        "wb.path": "dim",
        "wb.title": "bold",
        "wb.disabled": "dim strike",
        "wb.position.left": "green",
        "wb.position.center": "yellow",
        "wb.position.right": "cyan",
    }
)

_POSITION_STYLES: dict[str, str] = {
    "left": "wb.position.left",
    "center": "wb.position.center",
    "right": "wb.position.right",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console writing to a StringIO buffer (default width 120)."""
    return Console(
        file=StringIO(),
        theme=WB_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_position(position: str) -> str:
    return _POSITION_STYLES.get(position, "")
