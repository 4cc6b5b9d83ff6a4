"""Rich Console factory and theme for webpic status output.

Consoles render to a StringIO buffer, preserving the ``render -> str``
contract.  In non-TTY environments (tests, pipes) Rich disables color codes
on its own.  Markup fragments never pass through Rich.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

WEBPIC_THEME = Theme(
    {
        "webpic.ok": "bold green",
        "webpic.error": "bold red",
        "webpic.warning": "bold yellow",
        "webpic.op": "bold cyan",
        "webpic.path": "dim",
        "webpic.stage": "magenta",
        "webpic.count": "bold",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=WEBPIC_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
