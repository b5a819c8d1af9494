"""Show the structured form of a search query."""

from __future__ import annotations

import json

import click
from rich.tree import Tree

from expense_search.cli import Context, pass_context
from expense_search.commands._common import print_renderables, resolve_query
from expense_search.constants import OPERATOR_SIGNS
from expense_search.search.ast_nodes import ASTNode
from expense_search.utils.output import create_table


def _filter_tree(node: ASTNode, tree: Tree) -> None:
    if isinstance(node.left, ASTNode) or isinstance(node.right, ASTNode):
        branch = tree.add(f"[bold]{node.operator}[/bold]")
        for child in (node.left, node.right):
            if isinstance(child, ASTNode):
                _filter_tree(child, branch)
            else:
                branch.add(str(child))
        return
    sign = OPERATOR_SIGNS.get(node.operator or "", node.operator or "")
    value = ",".join(node.right) if isinstance(node.right, list) else node.right
    tree.add(f"{node.left}{sign}{value}", highlight=False)


@click.command("parse")
@click.argument("query", nargs=-1)
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print the structured query as JSON",
)
@pass_context
def cli(ctx: Context, query: tuple[str, ...], as_json: bool) -> None:
    """Parse a search query and show its root values, filters and hash.

    QUERY is a search string. Multiple arguments are joined with spaces.
    Without a query the configured default type and status are used.

    \b
    Examples:
      expense-search parse "type:expense merchant:Starbucks amount>500"
      expense-search parse --json 'category:Travel,Meals "team lunch"'
    """
    query_json = resolve_query(ctx, query)

    if as_json:
        click.echo(json.dumps(query_json.to_dict(), indent=2))
        return

    roots = create_table(title="Query", show_header=False)
    roots.add_column("Key", style="bold")
    roots.add_column("Value")
    roots.add_row("type", query_json.type)
    roots.add_row("status", query_json.status)
    roots.add_row("sortBy", query_json.sort_by)
    roots.add_row("sortOrder", query_json.sort_order)
    if query_json.policy_id:
        roots.add_row("policyID", query_json.policy_id)
    roots.add_row("hash", str(query_json.hash))

    renderables: list = [roots]

    if query_json.filters is not None:
        tree = Tree("[bold]filters[/bold]")
        _filter_tree(query_json.filters, tree)
        renderables.append(tree)

        flat = create_table(title="Flat filters", show_header=True, header_style="bold")
        flat.add_column("Key")
        flat.add_column("Operator")
        flat.add_column("Value")
        for filter_key, query_filters in query_json.flat_filters.items():
            for query_filter in query_filters:
                flat.add_row(filter_key, query_filter.operator, str(query_filter.value))
        renderables.append(flat)

    print_renderables(*renderables)
