"""Main CLI entry point - one subcommand per CliCommand."""

import logging
import sys
from typing import List, Optional

import click
import typer

from vpnctl.commands import COMMANDS
from vpnctl.core.app import execute
from vpnctl.core.errors import ExitCode
from vpnctl.ui.output import UIManager

app = typer.Typer(
    add_completion=False,
    help="vpnctl - control the VPN daemon from the command line.",
)

# Let arguments such as "-1" reach the command instead of Click's parser
_PASSTHROUGH = {"ignore_unknown_options": True, "allow_extra_args": True}


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr"),
) -> None:
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(ExitCode.INVALID_ARGS)


# ============================================================================
# Commands - thin wrappers; validation and exit codes live in vpnctl.commands
# ============================================================================

@app.command(
    "set",
    help=COMMANDS["set"].describe(),
    context_settings=_PASSTHROUGH,
    options_metavar="",
)
def set_(
    params: Optional[List[str]] = typer.Argument(None, metavar="<type> <value>"),
) -> None:
    raise typer.Exit(execute("set", params or []))


@app.command(
    "get",
    help=COMMANDS["get"].describe(),
    context_settings=_PASSTHROUGH,
    options_metavar="",
)
def get(
    params: Optional[List[str]] = typer.Argument(None, metavar="<type>"),
) -> None:
    raise typer.Exit(execute("get", params or []))


@app.command(
    "applysettings",
    help=COMMANDS["applysettings"].describe(),
    context_settings=_PASSTHROUGH,
    options_metavar="",
)
def applysettings(
    params: Optional[List[str]] = typer.Argument(None, metavar="<json>"),
) -> None:
    raise typer.Exit(execute("applysettings", params or []))


def run() -> None:
    """Entry point for console script mapping."""
    try:
        code = app(standalone_mode=False)
    except click.UsageError as e:
        UIManager().error(f"Error: {e.format_message()}")
        code = ExitCode.INVALID_ARGS
    sys.exit(int(code or 0))


if __name__ == "__main__":
    run()
