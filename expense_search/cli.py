"""Command-line interface for expense-search."""

from __future__ import annotations

import locale
import os
from pathlib import Path

import click

from expense_search import __version__
from expense_search.config import Config, load_config
from expense_search.exceptions import ConfigError
from expense_search.utils.formatting import set_default_currency
from expense_search.utils.messages import set_locale
from expense_search.utils.output import (
    debug,
    error,
    set_color,
    set_pager,
    set_verbosity,
    warning,
)

EXIT_SUCCESS = 0
EXIT_PARSE_ERROR = 1
EXIT_PAYLOAD_ERROR = 2
EXIT_CONFIG_ERROR = 3


class Context:
    """Shared context for all commands."""

    def __init__(self) -> None:
        self.config: Config = Config()
        self.verbose: bool = False
        self.debug: bool = False
        self.quiet: bool = False
        self.pager: bool | None = None  # None = auto


pass_context = click.make_pass_decorator(Context, ensure=True)


def _use_system_collation() -> None:
    """Sort text columns by the user's locale rather than by code point.

    Library callers own the process locale; only the CLI changes it.
    """
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        debug(f"Keeping default collation: {e}")


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, path_type=Path),
    help="Path to config file (default: ~/.config/expense-search/config.toml)",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Enable verbose output",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug output (implies --verbose)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    default=False,
    help="Suppress non-error output",
)
@click.option(
    "--pager/--no-pager",
    default=None,
    help="Force pager on/off (default: auto-detect)",
)
@click.version_option(version=__version__, prog_name="expense-search")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    no_color: bool,
    verbose: bool,
    debug: bool,
    quiet: bool,
    pager: bool | None,
) -> None:
    """expense-search: Parse, normalize and hash expense search queries.

    Turns search query strings into structured queries with stable hashes,
    converts them to and from advanced filter form values, and groups
    search results payloads into sorted list sections.

    Configuration is loaded from ~/.config/expense-search/config.toml by default.
    Use --config to specify an alternative configuration file.

    Examples:

        # Show the normalized form of a query
        expense-search normalize "merchant:Starbucks type:expense"

        # Show help for a specific command
        expense-search results --help
    """
    ctx.ensure_object(Context)
    app_ctx = ctx.obj
    app_ctx.verbose = verbose or debug
    app_ctx.debug = debug
    app_ctx.quiet = quiet
    app_ctx.pager = pager

    set_verbosity(verbose=verbose, debug=debug)
    set_pager(pager)
    _use_system_collation()

    # Color is disabled by --no-color, NO_COLOR env, or config
    disable_color = no_color or os.environ.get("NO_COLOR") is not None
    if disable_color:
        set_color(False)

    try:
        loaded_config, warnings = load_config(config)
    except ConfigError as e:
        error(str(e), hint="Fix the file or recreate it with: expense-search init-config --force")
        ctx.exit(EXIT_CONFIG_ERROR)
        return

    app_ctx.config = loaded_config

    if not disable_color and not loaded_config.colored_output:
        set_color(False)
    set_locale(loaded_config.locale)
    set_default_currency(loaded_config.default_currency)

    if not quiet:
        for warn in warnings:
            warning(warn)


@cli.command("help")
@click.argument("command", required=False, nargs=-1)
@click.pass_context
def help_cmd(ctx: click.Context, command: tuple[str, ...]) -> None:
    """Show help for a command."""
    group = cli
    for name in command:
        cmd = group.get_command(ctx, name)
        if cmd is None:
            error(f"Unknown command: {name}")
            ctx.exit(1)
            return
        if isinstance(cmd, click.Group):
            group = cmd
        else:
            click.echo(cmd.get_help(ctx))
            return
    click.echo(group.get_help(ctx))


def register_commands() -> None:
    """Register all commands from the commands package."""
    from expense_search.commands import discover_commands

    for command in discover_commands():
        cli.add_command(command)


# Register commands on import
register_commands()
