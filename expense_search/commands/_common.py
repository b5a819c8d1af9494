"""Helpers shared by the query and results commands."""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any

from rich.console import Console, RenderableType

from expense_search.cli import EXIT_PARSE_ERROR, EXIT_PAYLOAD_ERROR, Context
from expense_search.exceptions import PayloadError
from expense_search.search.ast_nodes import SearchQueryJSON
from expense_search.search.query import build_canned_search_query, build_search_query_json
from expense_search.utils.output import THEME, console, error, pager_print, verbose


def resolve_query(ctx: Context, query: tuple[str, ...]) -> SearchQueryJSON:
    """Parse the query arguments, or the configured canned query when none were given.

    Exits with the parse error code when the query is malformed.
    """
    query_string = " ".join(query).strip()
    if not query_string:
        config = ctx.config
        query_string = build_canned_search_query(
            config.default_type, config.default_status, config.default_policy_id
        )
        verbose(f"No query given, using {query_string}")

    result = build_search_query_json(query_string)
    if result.query is None:
        error(f"Invalid search query: {result.error}")
        raise SystemExit(EXIT_PARSE_ERROR)
    return result.query


def load_json_file(path: Path, source: str) -> dict[str, Any]:
    """Read a JSON object from a file.

    Raises:
        PayloadError: If the file is unreadable or not a JSON object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise PayloadError(source, f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise PayloadError(source, f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise PayloadError(source, f"{path} must hold a JSON object")
    return data


def load_json_file_or_exit(path: Path, source: str) -> dict[str, Any]:
    try:
        return load_json_file(path, source)
    except PayloadError as e:
        error(str(e))
        raise SystemExit(EXIT_PAYLOAD_ERROR)


def print_renderables(*renderables: RenderableType) -> None:
    """Render to a buffer and route the text through the pager."""
    buf = io.StringIO()
    render_console = Console(
        file=buf,
        theme=THEME,
        force_terminal=not console.no_color,
        width=max(console.width, 120),
        no_color=console.no_color,
    )
    for renderable in renderables:
        render_console.print(renderable)
    pager_print(buf.getvalue())
