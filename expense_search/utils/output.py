"""Rich console output helpers for expense-search."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

# Module-level verbosity flags (set by cli.py after argument parsing)
_verbose_enabled: bool = False
_debug_enabled: bool = False

# Module-level pager setting (None = auto, True = forced, False = disabled)
_pager_mode: bool | None = None

THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "query": "bold magenta",
        "hash": "dim",
        "amount": "bold",
        "report.name": "bold underline",
    }
)

console = Console(theme=THEME, stderr=False)
error_console = Console(theme=THEME, stderr=True)


def set_verbosity(*, verbose: bool = False, debug: bool = False) -> None:
    """Configure module-level verbosity flags.

    With ``debug`` the stdlib root logger is routed to stderr through rich,
    so library log records (parse failures, dropped filter values) show up.
    """
    global _verbose_enabled, _debug_enabled
    _verbose_enabled = verbose or debug  # debug implies verbose
    _debug_enabled = debug
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=error_console, show_path=False)],
            force=True,
        )


def set_color(enabled: bool) -> None:
    """Enable or disable color on both console instances."""
    console.no_color = not enabled
    error_console.no_color = not enabled


def set_pager(mode: bool | None) -> None:
    """Configure pager mode.

    Args:
        mode: True = always, False = never, None = auto (TTY + content > height).
    """
    global _pager_mode
    _pager_mode = mode


def pager_print(content: str) -> None:
    """Print content through ``$PAGER`` (or ``less``) when it overflows the terminal."""
    lines = content.count("\n")
    use_pager = _pager_mode
    if use_pager is None:
        use_pager = sys.stdout.isatty() and lines > shutil.get_terminal_size().lines

    if not use_pager:
        sys.stdout.write(content)
        sys.stdout.flush()
        return

    pager_env = os.environ.get("PAGER")
    cmd = pager_env.split() if pager_env else ["less", "-RFS"]
    try:
        proc = subprocess.Popen(cmd, stdin=subprocess.PIPE, encoding="utf-8", errors="replace")
        proc.communicate(input=content)
    except (OSError, subprocess.SubprocessError):
        # Pager failed, fall back to direct output
        sys.stdout.write(content)
        sys.stdout.flush()


def info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/info]")


def warning(message: str) -> None:
    """Print a warning message to stderr."""
    error_console.print(f"[warning]Warning:[/warning] {message}")


def error(message: str, hint: str | None = None) -> None:
    """Print an error message to stderr.

    Args:
        message: The error message.
        hint: Optional hint for resolution.
    """
    error_console.print(f"[error]Error:[/error] {message}")
    if hint:
        error_console.print(f"  [info]Hint:[/info] {hint}")


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/success]")


def verbose(message: str) -> None:
    """Print a message only when verbose mode is enabled."""
    if _verbose_enabled:
        console.print(f"[info]{message}[/info]")


def debug(message: str) -> None:
    """Print a debug message only when debug mode is enabled."""
    if _debug_enabled:
        error_console.print(f"[warning]\\[DEBUG][/warning] {message}")


def create_table(title: str | None = None, **kwargs: Any) -> Table:
    """Create a styled table."""
    return Table(title=title, **kwargs)


def print_query(query: str, query_hash: int | None = None) -> None:
    """Print a query string, optionally followed by its hash."""
    if query_hash is None:
        console.print(f"[query]{escape(query)}[/query]", highlight=False, soft_wrap=True)
    else:
        console.print(
            f"[query]{escape(query)}[/query] [hash]#{query_hash}[/hash]",
            highlight=False,
            soft_wrap=True,
        )
