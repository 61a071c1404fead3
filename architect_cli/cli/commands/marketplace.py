"""
Marketplace Commands.

Browse the local and remote (GitHub) tool marketplace and install tools
from it. Registered as both `marketplace` and the short alias `mp`.
"""

from typing import Optional

import typer
from rich.text import Text

from architect_cli.cli import output
from architect_cli.cli.group import ArchitectGroup
from architect_cli.cli.schemas import InstallResult, MarketplaceEntry, dump
from architect_cli.cli.spinner import with_spinner
from architect_cli.cli.state import CliState, get_state
from architect_cli.core.exceptions import OperationFailedError

app = typer.Typer(help="Browse and manage the tool marketplace", cls=ArchitectGroup, no_args_is_help=True)

INSTALL_HINT = "Install a tool with: architect marketplace install <name>"


def _entry_rows(entries: list[MarketplaceEntry], remote: bool) -> list[list]:
    return [
        [
            output.styled(e.name, "bold"),
            f"v{e.version}",
            e.publisher if remote else e.author,
            e.category,
            output.tags(e.tags),
        ]
        for e in entries
    ]


@app.command("list")
def list_local(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    List tools in your local marketplace.
    """
    state = get_state(ctx)
    state.run(_list(state, as_json))


async def _list(state: CliState, as_json: bool) -> None:
    data = await with_spinner(
        "Fetching local marketplace...",
        lambda: state.client.get("marketplace", schema=list[MarketplaceEntry]),
    )

    if as_json:
        output.json(dump(data))
        return

    if not data:
        output.empty_state("local marketplace is empty")
        return

    output.header(f"Local Marketplace ({len(data)})")
    output.table(["Name", "Version", "Author", "Category", "Tags"], _entry_rows(data, remote=False))


@app.command()
def browse(
    ctx: typer.Context,
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Search by name, description, or tags"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Filter by category"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Browse the remote GitHub marketplace.

    Examples:
        architect marketplace browse
        architect mp browse -q weather -c web
    """
    state = get_state(ctx)
    state.run(_browse(state, query, category, as_json))


async def _browse(state: CliState, query: str | None, category: str | None, as_json: bool) -> None:
    params = {"query": query or None, "category": category or None}
    data = await with_spinner(
        "Browsing remote marketplace...",
        lambda: state.client.get("marketplace/remote", params, schema=list[MarketplaceEntry]),
    )

    if as_json:
        output.json(dump(data))
        return

    if not data:
        output.empty_state(f"no tools matching '{query}'" if query else "remote marketplace is empty")
        return

    output.header(f"Remote Marketplace ({len(data)})")
    output.table(["Name", "Version", "Author", "Category", "Tags"], _entry_rows(data, remote=True))
    output.blank()
    output.info(INSTALL_HINT)


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Text to search for"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Search the remote marketplace.
    """
    state = get_state(ctx)
    state.run(_search(state, query, as_json))


async def _search(state: CliState, query: str, as_json: bool) -> None:
    data = await with_spinner(
        f"Searching for '{query}'...",
        lambda: state.client.get("marketplace/remote", {"query": query}, schema=list[MarketplaceEntry]),
    )

    if as_json:
        output.json(dump(data))
        return

    if not data:
        output.empty_state(f"no tools found matching '{query}'")
        return

    output.header(f"Search Results for '{query}' ({len(data)})")

    for e in data:
        output.blank()
        output.console.print(
            Text.assemble(
                (e.name, "bold white"),
                (f" v{e.version}", "dim"),
                " by ",
                (e.publisher, "cyan"),
            ),
            soft_wrap=True,
        )
        output.console.print(Text("  " + e.description), soft_wrap=True)
        output.console.print(Text("  ").append_text(output.tags(e.tags, style="dim", empty="")))

    output.blank()
    output.info("Install with: architect marketplace install <name>")


@app.command()
def install(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Marketplace id of the tool"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Overwrite if tool already exists locally"),
) -> None:
    """
    Install a tool from the remote marketplace.
    """
    state = get_state(ctx)
    state.run(_install(state, name, overwrite))


async def _install(state: CliState, name: str, overwrite: bool) -> None:
    result = await with_spinner(
        f"Installing {name}...",
        lambda: state.client.post(
            "marketplace/install",
            {"id": name, "overwrite": overwrite},
            schema=InstallResult,
        ),
    )

    if not result.success:
        raise OperationFailedError(result.message or f"Failed to install '{name}'")

    output.success(f"Tool '{name}' installed successfully")
    output.info("Run 'architect tools list' to see it")
