"""
Architect CLI entry point.

Manage an Architect MCP server from the terminal.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    architect --help                          # Show help
    architect status                          # Is the server running?

    # Tools
    architect tools list --active             # Active tools only
    architect tools source weather            # Code and configuration
    architect tools stats                     # Execution statistics
    architect tools reload                    # Reload approved tools

    # Marketplace (alias: mp)
    architect marketplace list                # Local marketplace
    architect mp browse -q weather            # Remote marketplace
    architect mp install weather --overwrite  # Install from remote

    # Server
    architect server overview                 # Counters and rates
    architect server logs -n 20 -t weather    # Audit log
    architect server cache clear weather      # Drop cached results

Options:
    --server URL      Server URL (default: http://localhost:3001, env: ARCHITECT_SERVER)
    --config PATH     YAML config file (env: ARCHITECT_CONFIG)
    --verbose, -v     Enable verbose output (INFO level logging)
    --debug, -d       Enable debug mode (DEBUG level logging)
    --version         Show version and exit
"""

from pathlib import Path
from typing import Optional

import typer
from rich.text import Text

from architect_cli import __version__
from architect_cli.cli import output
from architect_cli.cli.commands import marketplace_app, server_app, tools_app
from architect_cli.cli.commands.server import check_status
from architect_cli.cli.group import ArchitectGroup, print_help
from architect_cli.cli.state import CliState, get_state
from architect_cli.core.config import resolve_config
from architect_cli.core.exceptions import ConfigError
from architect_cli.core.logging import get_logger, log_with_source, setup_logging

logger = get_logger(__name__)

app = typer.Typer(
    name="architect",
    help="⚡ Architect MCP CLI - Manage your Architect MCP server from the terminal.",
    cls=ArchitectGroup,
    invoke_without_command=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register command groups
app.add_typer(tools_app, name="tools")
app.add_typer(marketplace_app, name="marketplace")
app.add_typer(marketplace_app, name="mp", hidden=True)
app.add_typer(server_app, name="server")


@app.command()
def status(ctx: typer.Context) -> None:
    """
    Quick check: is the server running?
    """
    state = get_state(ctx)
    state.run(check_status(state))


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _build_state(ctx: typer.Context, server: str | None, config_file: Path | None) -> CliState:
    """Resolve configuration once, or re-point a state that was handed in."""
    if isinstance(ctx.obj, CliState):
        state = ctx.obj
        if server:
            state.reconfigure(state.config.with_server(server))
        return state
    return CliState.from_config(resolve_config(server_url=server, config_path=config_file))


@app.callback()
def main(
    ctx: typer.Context,
    server: Optional[str] = typer.Option(
        None,
        "--server",
        metavar="URL",
        help="Server URL (default: http://localhost:3001)",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        metavar="PATH",
        help="YAML config file (default: ~/.config/architect/config.yaml)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    ⚡ Architect MCP CLI.

    Manage your Architect MCP server from the terminal: tools, marketplace,
    audit logs, cache and server configuration.
    """
    if ctx.invoked_subcommand is None:
        print_help(ctx)
        raise typer.Exit()

    try:
        state = _build_state(ctx, server, config_file)
    except ConfigError as e:
        output.error(e.message)
        raise typer.Exit(1) from e
    ctx.obj = state

    # Configure logging based on flags
    if debug:
        setup_logging(state.config.logging, level="DEBUG")
        output.err_console.print(Text("Debug mode enabled", style="dim"))
    elif verbose:
        setup_logging(state.config.logging, level="INFO")
    else:
        setup_logging(state.config.logging)

    log_with_source(
        logger,
        "config",
        "debug",
        "Configuration resolved",
        server=state.server_url,
        timeout=state.config.timeout,
        config_path=str(state.config.config_path) if state.config.config_path else None,
    )


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
