"""Initialize configuration file for expense-search."""

from __future__ import annotations

from importlib import resources
from pathlib import Path

import click

from expense_search.cli import EXIT_CONFIG_ERROR, Context, pass_context
from expense_search.config import get_default_config_path
from expense_search.utils.output import error, info, success


def _load_example_config() -> str:
    """Load the example configuration from package data."""
    return resources.files("expense_search").joinpath("config.example.toml").read_text()


@click.command("init-config")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    default=False,
    help="Overwrite existing config file",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output path for config file (default: ~/.config/expense-search/config.toml)",
)
@pass_context
def cli(ctx: Context, force: bool, output: Path | None) -> None:
    """Create a new configuration file with default settings.

    The file is written to ~/.config/expense-search/config.toml unless
    --output names another path. Every option is listed with its default.

    \b
    Examples:
      expense-search init-config
      expense-search init-config --output ./my-config.toml
      expense-search init-config --force
    """
    config_path = output if output is not None else get_default_config_path()
    config_path = config_path.expanduser().resolve()

    if config_path.exists() and not force:
        error(
            f"Config file already exists: {config_path}",
            hint="Use --force to overwrite",
        )
        raise SystemExit(EXIT_CONFIG_ERROR)

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(_load_example_config())
    except OSError as e:
        error(f"Failed to write config file: {e}")
        raise SystemExit(EXIT_CONFIG_ERROR)

    success(f"Created config file: {config_path}")
    info("Edit this file to customize your settings.")
