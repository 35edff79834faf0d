"""Rich Console factory and theme for pricectl output.

Consoles render to a StringIO buffer, preserving the
``format_result() -> str`` contract.  In non-TTY environments (tests,
pipes) Rich disables color codes automatically.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PRICE_THEME = Theme(
    {
        "price.ok": "bold green",
        "price.error": "bold red",
        "price.warning": "bold yellow",
        "price.op": "bold cyan",
        "price.key": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=PRICE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
