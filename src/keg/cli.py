#!/usr/bin/env python3
"""
keg: CLI for the Knowledge Exchange Grid node index

Usage:
    keg dex                        # Pretty list of all nodes
    keg dex --format=json          # Render as JSON, TSV, Markdown, includes
    keg dex --title="go"           # Only nodes with "go" in the title
    keg choose "term"              # Resolve a title fragment to one node
    keg highest                    # Highest node id
"""

from __future__ import annotations

import difflib
import functools
import json
import sys
from collections.abc import Sequence
from typing import NoReturn

import click
from click.exceptions import ClickException, UsageError

from . import __version__ as KEG_VERSION
from .errors import ErrorCode, KegError, format_error_json


# ─────────────────────────────────────────────────────────────────────────────
# Output Formatting
# ─────────────────────────────────────────────────────────────────────────────


def output(data, as_json: bool = False):
    """Output data as JSON or formatted text."""
    if as_json:
        click.echo(json.dumps(data, indent=2, default=str))
    else:
        click.echo(data)


def _handle_error(ctx: click.Context, error: Exception, exit_code: int = 1) -> NoReturn:
    """Handle an error with optional JSON output.

    If --json-errors is enabled, outputs structured JSON error.
    Otherwise, outputs human-readable error message.
    """
    json_errors = ctx.obj.get("json_errors", False) if ctx.obj else False

    if isinstance(error, KegError):
        if json_errors:
            click.echo(error.to_json(), err=True)
        else:
            click.echo(f"Error: {error.message}", err=True)
    else:
        if json_errors:
            click.echo(format_error_json("INTERNAL_ERROR", str(error)), err=True)
        else:
            click.echo(f"Error: {error}", err=True)

    sys.exit(exit_code)


def get_error_code_for_exception(exc: Exception) -> str:
    """Map Click exceptions to error codes."""
    if isinstance(exc, click.BadParameter):
        return "INVALID_ARGUMENT"
    elif isinstance(exc, click.MissingParameter):
        return "MISSING_ARGUMENT"
    elif isinstance(exc, click.NoSuchOption):
        return "UNKNOWN_OPTION"
    elif isinstance(exc, UsageError):
        return "USAGE_ERROR"
    elif isinstance(exc, ClickException):
        return "CLI_ERROR"
    return "UNKNOWN_ERROR"


# ─────────────────────────────────────────────────────────────────────────────
# JSON Error Handling
# ─────────────────────────────────────────────────────────────────────────────


class JsonErrorGroup(click.Group):
    """Custom Click group that formats errors as JSON when --json-errors is set.

    This handles Click validation errors (bad option values, missing args, etc.)
    that occur before the command callback is invoked. Also provides typo
    suggestions for unknown commands.
    """

    def resolve_command(self, ctx, args):
        """Override to suggest similar commands for typos."""
        try:
            return super().resolve_command(ctx, args)
        except UsageError as e:
            cmd_name = args[0] if args else ""
            if cmd_name and "No such command" in str(e):
                matches = difflib.get_close_matches(
                    cmd_name, self.list_commands(ctx), n=1, cutoff=0.6
                )
                if matches:
                    raise UsageError(f"No such command '{cmd_name}'. Did you mean '{matches[0]}'?")
            raise

    def invoke(self, ctx):
        """Override invoke to catch and format errors."""
        try:
            return super().invoke(ctx)
        except ClickException as e:
            if ctx.params.get("json_errors"):
                code = get_error_code_for_exception(e)
                click.echo(format_error_json(code, e.format_message()), err=True)
                raise SystemExit(1)
            raise

    def main(
        self,
        args: Sequence[str] | None = None,
        prog_name: str | None = None,
        complete_var: str | None = None,
        standalone_mode: bool = True,
        **extra,
    ):
        # Errors raised while parsing group options happen before invoke(),
        # so --json-errors has to be spotted in the raw arguments.
        argv = list(args) if args is not None else list(sys.argv[1:])
        if "--json-errors" not in argv:
            return super().main(args, prog_name, complete_var, standalone_mode, **extra)

        # Normalize misplaced --json-errors to be a true global flag.
        argv = [a for a in argv if a != "--json-errors"]
        argv.insert(0, "--json-errors")

        try:
            return super().main(
                argv,
                prog_name,
                complete_var,
                standalone_mode=False,
                **extra,
            )
        except ClickException as e:
            code = get_error_code_for_exception(e)
            click.echo(format_error_json(code, e.format_message()), err=True)
            raise SystemExit(1)
        except SystemExit:
            # In case a subcommand calls sys.exit explicitly, preserve it.
            raise
        except Exception as e:
            click.echo(format_error_json("INTERNAL_ERROR", str(e)), err=True)
            raise SystemExit(1)


# ─────────────────────────────────────────────────────────────────────────────
# Main CLI Group
# ─────────────────────────────────────────────────────────────────────────────


@click.group(cls=JsonErrorGroup)
@click.version_option(version=KEG_VERSION, prog_name="keg")
@click.option("--keg", "keg_name", envvar="KEG_NAME", help="Use a named local keg from the config")
@click.option(
    "--json-errors",
    "json_errors",
    is_flag=True,
    help="Output errors as JSON (for programmatic use)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    envvar="KEG_QUIET",
    help="Suppress warnings, show only errors and essential output",
)
@click.option(
    "--color/--no-color",
    "color",
    default=None,
    help="Force or disable styled output (default: only on a terminal)",
)
@click.pass_context
def cli(ctx: click.Context, keg_name: str | None, json_errors: bool, quiet: bool, color: bool | None):
    """keg: index of Knowledge Exchange Grid nodes.

    \b
    Quick start:
      keg dex                          # Pretty list, lowest id first
      keg dex --format=md              # Markdown list for dex/latest.md
      keg dex --format=includes -t go  # Include links for titles with "go"
      keg choose "term"                # Pick one node by title text
      keg highest                      # Highest node id

    \b
    The keg is found from --keg NAME (see `keg locals`), then KEG_ROOT,
    then by walking up from the current directory to a `keg` file.
    """
    from ._logging import set_quiet_mode

    ctx.ensure_object(dict)
    ctx.obj["keg"] = keg_name
    ctx.obj["json_errors"] = json_errors
    ctx.obj["quiet"] = quiet
    ctx.obj["color"] = color

    if quiet:
        set_quiet_mode(True)


def _load_dex(ctx: click.Context):
    """Load the dex of the selected keg, exiting with an error if that fails."""
    from .config import get_dex_path, get_keg_root
    from .dexfile import load_dex

    try:
        root = get_keg_root(ctx.obj.get("keg"))
        return load_dex(get_dex_path(root))
    except KegError as e:
        _handle_error(ctx, e)


# ─────────────────────────────────────────────────────────────────────────────
# Dex Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command("dex")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["pretty", "json", "tsv", "md", "includes"]),
    default="pretty",
    help="Output format",
)
@click.option("--title", "-t", "title_text", help="Only entries whose title contains this text")
@click.option("--sort/--no-sort", default=True, help="Order by node id (default) or keep file order")
@click.pass_context
def dex_cmd(ctx: click.Context, fmt: str, title_text: str | None, sort: bool):
    """Render the node index.

    \b
    Examples:
      keg dex
      keg dex --format=json
      keg dex --format=tsv --no-sort
      keg dex --title="kubernetes" --format=includes
    """
    from .style import style_for

    dex = _load_dex(ctx)
    if title_text is not None:
        dex = dex.with_title_text(title_text)
    if sort:
        dex = dex.by_id()

    if fmt == "json":
        click.echo(dex.to_json())
    elif fmt == "tsv":
        click.echo(dex.tsv(), nl=False)
    elif fmt == "md":
        click.echo(dex.md(), nl=False)
    elif fmt == "includes":
        click.echo(dex.as_includes(), nl=False)
    else:
        if not dex:
            click.echo("No entries found.", err=True)
            return
        color = ctx.obj.get("color")
        click.echo(dex.pretty(style_for(color)), color=color)


# ─────────────────────────────────────────────────────────────────────────────
# Highest Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.option("--width", is_flag=True, help="Print the digit count of the highest id instead")
@click.pass_context
def highest(ctx: click.Context, width: bool):
    """Show the highest node id (0 for an empty index)."""
    dex = _load_dex(ctx)
    click.echo(dex.highest_width() if width else dex.highest_string())


# ─────────────────────────────────────────────────────────────────────────────
# Choose Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.argument("text")
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["id", "md", "include", "json"]),
    default="id",
    help="How to print the chosen entry",
)
@click.pass_context
def choose(ctx: click.Context, text: str, fmt: str):
    """Resolve title text to a single node.

    With several matches, a numbered list is shown and the node is picked
    by number. An empty answer selects nothing.

    \b
    Examples:
      keg choose "bash"
      keg choose "bash" --format=include
    """
    from .choose import choose_from
    from .style import style_for

    color = ctx.obj.get("color")
    dex = _load_dex(ctx).by_id()
    entry = dex.choose_with_title_text(
        text,
        chooser=functools.partial(choose_from, color=color),
        style=style_for(color),
    )

    if entry is None:
        _handle_error(
            ctx,
            KegError(ErrorCode.NO_ENTRY_SELECTED, "No entry selected.", {"text": text}),
        )

    if fmt == "json":
        click.echo(entry.to_json())
    elif fmt == "md":
        click.echo(entry.md())
    elif fmt == "include":
        click.echo(entry.as_include())
    else:
        click.echo(entry.id_string())


# ─────────────────────────────────────────────────────────────────────────────
# Locals Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command("locals")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def locals_cmd(ctx: click.Context, as_json: bool):
    """List the named local kegs from the user config."""
    from .config import get_local_kegs

    try:
        kegs = get_local_kegs()
    except KegError as e:
        _handle_error(ctx, e)

    if as_json:
        output([{"name": k.name, "path": str(k.path)} for k in kegs], as_json=True)
        return

    if not kegs:
        click.echo("No local kegs configured.")
        return

    width = max(len(k.name) for k in kegs)
    for k in kegs:
        click.echo(f"{k.name.ljust(width)}  {k.path}")


# ─────────────────────────────────────────────────────────────────────────────
# Entry Point
# ─────────────────────────────────────────────────────────────────────────────


def main():
    """Entry point for keg CLI."""
    from ._logging import configure_logging

    configure_logging()
    cli()


if __name__ == "__main__":
    main()
