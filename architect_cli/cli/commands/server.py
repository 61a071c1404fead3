"""
Server Commands.

Commands for monitoring and managing the Architect server: health,
overview counters, audit logs, cache, permissions, schedules, webhooks,
pipelines and stored secrets.
"""

from typing import Optional

import typer
from rich.text import Text

from architect_cli.cli import output
from architect_cli.cli.group import ArchitectGroup
from architect_cli.cli.schemas import (
    AuditEntry,
    CacheClearResult,
    CacheStats,
    Overview,
    Permission,
    Pipeline,
    Schedule,
    Secret,
    Webhook,
    dump,
)
from architect_cli.cli.spinner import with_spinner
from architect_cli.cli.state import CliState, get_state
from architect_cli.core.exceptions import ConnectionFailedError

app = typer.Typer(help="Monitor and manage the Architect server", cls=ArchitectGroup, no_args_is_help=True)
cache_app = typer.Typer(help="Manage the server cache", cls=ArchitectGroup, no_args_is_help=True)
app.add_typer(cache_app, name="cache")


# =============================================================================
# Health
# =============================================================================


async def check_status(state: CliState) -> None:
    """
    Report whether the server answers the overview endpoint.

    Connection failures get a dedicated "not running" message; any other
    error is re-raised to be reported as is.
    """
    url = state.server_url
    try:
        await with_spinner("Checking server...", lambda: state.client.get("overview"))
    except ConnectionFailedError as e:
        output.error(Text.assemble("Server is not running at ", (url, "cyan")))
        output.console.print(
            Text("  Set ARCHITECT_SERVER env variable or pass --server to change the URL", style="dim"),
            soft_wrap=True,
        )
        raise typer.Exit(1) from e

    output.success(Text.assemble("Server is running at ", (url, "cyan")))


@app.command()
def status(ctx: typer.Context) -> None:
    """
    Check if the server is running.
    """
    state = get_state(ctx)
    state.run(check_status(state))


@app.command()
def overview(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Show server overview and stats.
    """
    state = get_state(ctx)
    state.run(_overview(state, as_json))


async def _overview(state: CliState, as_json: bool) -> None:
    data = await with_spinner(
        "Fetching overview...",
        lambda: state.client.get("overview", schema=Overview),
    )

    if as_json:
        output.json(dump(data))
        return

    output.header("Architect Server Overview")
    output.print_server_url(state.server_url)
    output.blank()

    output.table(
        ["Metric", "Value"],
        [
            ["Total Tools", data.total_tools],
            ["Active Tools", output.styled(data.active_tools, "green")],
            ["Total Executions", data.total_calls],
            ["Success Rate", output.styled(data.success_rate, "green")],
            ["Failed", output.styled(data.total_failed, "red") if data.total_failed > 0 else "0"],
            ["Cache Hit Rate", output.styled(f"{output.number(data.cache_hit_rate)}%", "cyan")],
            ["Schedules", data.schedules_count],
            ["Webhooks", data.webhooks_count],
            ["Pipelines", data.pipelines_count],
            ["Aliases", data.aliases_count],
        ],
    )


# =============================================================================
# Audit logs
# =============================================================================


@app.command()
def logs(
    ctx: typer.Context,
    limit: int = typer.Option(50, "--limit", "-n", min=1, help="Number of entries to show"),
    tool: Optional[str] = typer.Option(None, "--tool", "-t", help="Filter by tool name"),
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Show audit logs.

    Examples:
        architect server logs
        architect server logs -n 10 -t weather
    """
    state = get_state(ctx)
    state.run(_logs(state, limit, tool, as_json))


async def _logs(state: CliState, limit: int, tool: str | None, as_json: bool) -> None:
    data = await with_spinner(
        "Fetching logs...",
        lambda: state.client.get("audit", {"limit": limit, "tool": tool or None}, schema=list[AuditEntry]),
    )

    if as_json:
        output.json(dump(data))
        return

    if not data:
        output.empty_state("no audit logs yet")
        return

    output.header(f"Audit Logs ({len(data)})")
    output.table(
        ["Time", "Action", "Tool", "Duration"],
        [
            [
                output.styled(output.timestamp(entry.timestamp), "dim"),
                output.styled(entry.action, "cyan"),
                entry.tool_name,
                f"{output.number(entry.duration)}ms" if entry.duration else output.styled("—", "dim"),
            ]
            for entry in data
        ],
    )


# =============================================================================
# Cache
# =============================================================================


@cache_app.command("stats")
def cache_stats(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    Show cache statistics.
    """
    state = get_state(ctx)
    state.run(_cache_stats(state, as_json))


async def _cache_stats(state: CliState, as_json: bool) -> None:
    data = await with_spinner(
        "Fetching cache stats...",
        lambda: state.client.get("cache", schema=CacheStats),
    )

    if as_json:
        output.json(dump(data))
        return

    output.header("Cache Stats")
    output.table(
        ["Metric", "Value"],
        [
            ["Total Entries", data.total_entries],
            ["Hits", output.styled(data.hits, "green")],
            ["Misses", output.styled(data.misses, "yellow")],
            ["Hit Rate", output.styled(f"{output.number(data.hit_rate)}%", "cyan")],
        ],
    )

    if data.entries_by_tool:
        output.blank()
        output.header("Entries by Tool")
        output.table(
            ["Tool", "Entries"],
            [[output.styled(tool, "bold"), n] for tool, n in data.entries_by_tool.items()],
        )


@cache_app.command("clear")
def cache_clear(
    ctx: typer.Context,
    tool: Optional[str] = typer.Argument(None, help="Only clear entries for this tool"),
) -> None:
    """
    Clear cache for a tool or all tools.
    """
    state = get_state(ctx)
    state.run(_cache_clear(state, tool))


async def _cache_clear(state: CliState, tool: str | None) -> None:
    result = await with_spinner(
        f"Clearing cache for '{tool}'..." if tool else "Clearing all cache...",
        lambda: state.client.delete("cache", {"tool": tool} if tool else None, schema=CacheClearResult),
    )

    output.success(Text.assemble("Cleared ", output.count(result.cleared, "cache entry", "cache entries")))


# =============================================================================
# Configuration listings
# =============================================================================


@app.command()
def permissions(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    List all tool permissions.
    """
    state = get_state(ctx)
    state.run(_permissions(state, as_json))


async def _permissions(state: CliState, as_json: bool) -> None:
    data = await with_spinner(
        "Fetching permissions...",
        lambda: state.client.get("permissions", schema=list[Permission]),
    )

    if as_json:
        output.json(dump(data))
        return

    if not data:
        output.empty_state("no permissions configured")
        return

    output.header(f"Permissions ({len(data)})")
    output.table(
        ["Tool", "Version", "Capabilities", "Approved At"],
        [
            [
                output.styled(p.tool_name, "bold"),
                f"v{p.tool_version}",
                Text(", ").join(output.styled(c.type, "yellow") for c in p.approved_capabilities),
                output.timestamp(p.approved_at),
            ]
            for p in data
        ],
    )


@app.command()
def schedules(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    List all scheduled tool runs.
    """
    state = get_state(ctx)
    state.run(_schedules(state, as_json))


async def _schedules(state: CliState, as_json: bool) -> None:
    data = await with_spinner(
        "Fetching schedules...",
        lambda: state.client.get("schedules", schema=list[Schedule]),
    )

    if as_json:
        output.json(dump(data))
        return

    if not data:
        output.empty_state("no schedules configured")
        return

    output.header(f"Schedules ({len(data)})")
    output.table(
        ["ID", "Tool", "Cron", "Status", "Last Run", "Next Run"],
        [
            [
                output.styled(_short_id(s.id, 16), "dim"),
                output.styled(s.tool_name, "bold"),
                output.styled(s.cron, "cyan"),
                output.styled("enabled", "green") if s.enabled else output.styled("disabled", "dim"),
                output.timestamp(s.last_run) or output.styled("never", "dim"),
                output.timestamp(s.next_run) or output.styled("n/a", "dim"),
            ]
            for s in data
        ],
    )


@app.command()
def webhooks(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    List all configured webhooks.
    """
    state = get_state(ctx)
    state.run(_webhooks(state, as_json))


async def _webhooks(state: CliState, as_json: bool) -> None:
    data = await with_spinner(
        "Fetching webhooks...",
        lambda: state.client.get("webhooks", schema=list[Webhook]),
    )

    if as_json:
        output.json(dump(data))
        return

    if not data:
        output.empty_state("no webhooks configured")
        return

    output.header(f"Webhooks ({len(data)})")
    output.table(
        ["ID", "Tool", "Path", "Method", "Status", "Secret"],
        [
            [
                output.styled(_short_id(w.id, 12), "dim"),
                output.styled(w.tool_name, "bold"),
                output.styled(f"/webhook{w.path}", "cyan"),
                output.styled(w.method, "blue"),
                output.styled("enabled", "green") if w.enabled else output.styled("disabled", "dim"),
                output.styled("✓", "green") if w.has_secret else output.styled("—", "dim"),
            ]
            for w in data
        ],
    )


@app.command()
def pipelines(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    List all configured pipelines.
    """
    state = get_state(ctx)
    state.run(_pipelines(state, as_json))


async def _pipelines(state: CliState, as_json: bool) -> None:
    data = await with_spinner(
        "Fetching pipelines...",
        lambda: state.client.get("pipelines", schema=list[Pipeline]),
    )

    if as_json:
        output.json(dump(data))
        return

    if not data:
        output.empty_state("no pipelines defined")
        return

    output.header(f"Pipelines ({len(data)})")
    output.table(
        ["Name", "Description", "Steps"],
        [
            [
                output.styled(p.name, "bold"),
                p.description,
                Text.assemble(
                    (str(len(p.steps)), "cyan"),
                    " → ",
                    " → ".join(step.tool for step in p.steps),
                ),
            ]
            for p in data
        ],
    )


@app.command()
def secrets(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """
    List stored secret names (values never shown).
    """
    state = get_state(ctx)
    state.run(_secrets(state, as_json))


async def _secrets(state: CliState, as_json: bool) -> None:
    data = await with_spinner(
        "Fetching secrets...",
        lambda: state.client.get("secrets", schema=list[Secret]),
    )

    if as_json:
        output.json(dump(data))
        return

    if not data:
        output.empty_state("no secrets stored")
        return

    output.header(f"Secrets ({len(data)})")
    output.info("Secret values are never displayed")
    output.blank()
    output.table(
        ["Name", "Created", "Updated"],
        [
            [output.styled(s.name, "bold"), output.timestamp(s.created_at), output.timestamp(s.updated_at)]
            for s in data
        ],
    )


def _short_id(value: str, length: int) -> str:
    return value[:length] + "..."
