"""Interactive selection from a list of display lines.

A chooser is any callable that takes the lines to show and returns the
zero-based index of the selected line. A negative index means the user
selected nothing. Failures are reported by raising `ChooseError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

import click

from .errors import ChooseError

log = logging.getLogger(__name__)

Chooser = Callable[[Sequence[str]], int]


def choose_from(
    lines: Sequence[str],
    *,
    prompt: str = "#?",
    color: bool | None = None,
) -> int:
    """Show a numbered list on stderr and ask the user to pick one line.

    Numbers shown to the user start at 1. A blank answer selects nothing
    and returns -1. Blocks until the user answers; there is no timeout.

    Raises:
        ChooseError: If the answer is not a listed number or the prompt
            was aborted (Ctrl-C, end of input).
    """
    width = len(str(len(lines)))
    for number, line in enumerate(lines, start=1):
        click.echo(f"{number:>{width}}. {line}", err=True, color=color)

    try:
        answer = click.prompt(prompt, default="", show_default=False, err=True)
    except click.Abort as e:
        raise ChooseError("selection aborted") from e

    answer = answer.strip()
    if not answer:
        log.debug("Empty answer, nothing selected")
        return -1

    try:
        number = int(answer)
    except ValueError as e:
        raise ChooseError(f"not a number: {answer!r}", {"answer": answer}) from e

    if not 1 <= number <= len(lines):
        raise ChooseError(
            f"choice out of range: {number}",
            {"answer": answer, "choices": len(lines)},
        )
    return number - 1
