"""Terminal style fragments used by pretty rendering.

The fragments are opaque text wrapped around columns. Rendering with
`PLAIN` gives the same layout without any control sequences.
"""

from typing import NamedTuple

import click


class Style(NamedTuple):
    """Named style fragments for the columns of a pretty line."""

    muted: str = ""
    accent: str = ""
    default: str = ""
    reset: str = ""


PLAIN = Style()

ANSI = Style(
    muted=click.style("", fg="bright_black", reset=False),
    accent=click.style("", fg="green", reset=False),
    default=click.style("", fg="white", reset=False),
    reset=click.style("", reset=True),
)


def style_for(color: bool | None) -> Style:
    """Pick a style for an explicit --color/--no-color choice.

    None means "let click decide", which strips ANSI codes on echo when
    the stream is not a terminal.
    """
    return PLAIN if color is False else ANSI
