"""
Tool Commands.

Commands for listing, inspecting and reloading the tools registered on the
Architect server.
"""

from typing import Optional

import typer
from rich.text import Text

from architect_cli.cli import output
from architect_cli.cli.group import ArchitectGroup
from architect_cli.cli.schemas import ReloadResult, Tool, ToolStats, dump
from architect_cli.cli.spinner import with_spinner
from architect_cli.cli.state import CliState, get_state
from architect_cli.core.exceptions import NotFoundError

app = typer.Typer(help="Manage Architect tools", cls=ArchitectGroup, no_args_is_help=True)


def filter_tools(
    tools: list[Tool],
    active: bool = False,
    category: str | None = None,
    tag: str | None = None,
) -> list[Tool]:
    """Keep tools matching every given filter. Omitted filters match everything."""
    filtered = tools
    if active:
        filtered = [t for t in filtered if t.active]
    if category:
        filtered = [t for t in filtered if t.category == category]
    if tag:
        filtered = [t for t in filtered if tag in t.tags]
    return filtered


def find_tool(tools: list[Tool], name: str) -> Tool:
    """Return the tool with exactly this name."""
    for tool in tools:
        if tool.name == name:
            return tool
    raise NotFoundError(f"Tool '{name}' not found")


@app.command("list")
def list_tools(
    ctx: typer.Context,
    active: bool = typer.Option(False, "--active", "-a", help="Show only active tools"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Filter by category"),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Filter by tag"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    List all tools.

    Examples:
        architect tools list
        architect tools list --active --category web --tag http
    """
    state = get_state(ctx)
    state.run(_list(state, active, category, tag, as_json))


async def _list(
    state: CliState,
    active: bool,
    category: str | None,
    tag: str | None,
    as_json: bool,
) -> None:
    data = await with_spinner(
        "Fetching tools...",
        lambda: state.client.get("tools", schema=list[Tool]),
    )
    filtered = filter_tools(data, active=active, category=category, tag=tag)

    if as_json:
        output.json(dump(filtered))
        return

    if not filtered:
        output.empty_state("no tools found")
        return

    output.header(f"Tools ({len(filtered)})")
    output.table(
        ["Name", "Status", "Version", "Category", "Tags"],
        [
            [
                output.styled(t.name, "bold"),
                output.styled("active", "green") if t.active else output.styled("inactive", "dim"),
                f"v{t.version}",
                t.category or "other",
                output.tags(t.tags),
            ]
            for t in filtered
        ],
    )


@app.command()
def source(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Tool name"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Show tool source code and configuration.

    Examples:
        architect tools source weather
    """
    state = get_state(ctx)
    state.run(_source(state, name, as_json))


async def _source(state: CliState, name: str, as_json: bool) -> None:
    data = await with_spinner(
        f"Fetching {name}...",
        lambda: state.client.get("tools", schema=list[Tool]),
    )
    tool = find_tool(data, name)

    if as_json:
        output.json(dump(tool))
        return

    output.header(f"Tool: {tool.name}")
    output.label("Status", "active" if tool.active else "inactive")
    output.label("Version", f"v{tool.version}")
    output.label("Category", tool.category or "other")
    output.label("Tags", ", ".join(tool.tags) or "none")
    output.label("Author", tool.author or "unknown")
    output.label("Dependencies", ", ".join(tool.dependencies) or "none")
    output.label("Created", output.timestamp(tool.created_at) or "unknown")
    output.label("Updated", output.timestamp(tool.updated_at) or "unknown")

    if tool.capabilities:
        output.blank()
        output.label("Capabilities", ", ".join(c.type for c in tool.capabilities))

    if tool.rate_limit:
        output.blank()
        output.label(
            "Rate Limit",
            f"{tool.rate_limit.max_calls_per_minute}/min, {tool.rate_limit.max_calls_per_hour}/hr",
        )

    output.blank()
    output.console.print(Text("Description:", style="dim"))
    output.console.print(Text("  " + tool.description))

    if tool.code:
        output.blank()
        output.console.print(Text("Code:", style="dim"))
        output.console.print(Text(tool.code, style="yellow"))


@app.command()
def stats(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Only show this tool"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Show execution statistics for tools.

    Examples:
        architect tools stats
        architect tools stats weather --json
    """
    state = get_state(ctx)
    state.run(_stats(state, name, as_json))


async def _stats(state: CliState, name: str | None, as_json: bool) -> None:
    data = await with_spinner(
        "Fetching stats...",
        lambda: state.client.get("stats", schema=dict[str, ToolStats]),
    )

    entries = {k: v for k, v in data.items() if k == name} if name else data

    if as_json:
        output.json(dump(entries))
        return

    if not entries:
        output.empty_state(f"no stats for '{name}'" if name else "no execution stats yet")
        return

    output.header("Execution Stats")
    output.table(
        ["Tool", "Total", "Success", "Failed", "Success Rate", "Avg Duration", "Last Run"],
        [
            [
                output.styled(tool_name, "bold"),
                s.total_calls,
                output.styled(s.successful_calls, "green"),
                output.styled(s.failed_calls, "red") if s.failed_calls > 0 else "0",
                s.success_rate,
                f"{output.number(s.average_duration_ms)}ms",
                output.timestamp(s.last_executed_at) or output.styled("never", "dim"),
            ]
            for tool_name, s in entries.items()
        ],
    )


@app.command()
def reload(ctx: typer.Context) -> None:
    """
    Reload all approved tools on the server.

    Reports how many tools were loaded, skipped and failed.
    """
    state = get_state(ctx)
    state.run(_reload(state))


async def _reload(state: CliState) -> None:
    result = await with_spinner(
        "Reloading tools...",
        lambda: state.client.post("tools/reload", schema=ReloadResult),
    )

    output.success("Tools reloaded")
    output.label("Loaded", result.loaded)
    output.label("Skipped", result.skipped)
    output.label("Failed", result.failed)
