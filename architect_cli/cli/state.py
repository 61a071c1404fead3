"""
Invocation State.

The configuration and API client for one CLI invocation. The root callback
builds a CliState and stores it on the Typer context; every command pulls
it back out with get_state() instead of reaching for module-level globals.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Coroutine

import typer

from architect_cli.cli import output
from architect_cli.cli.client import APIClient
from architect_cli.core.config import CliConfig
from architect_cli.core.exceptions import ArchitectError


@dataclass
class CliState:
    """Explicit dependencies handed to each command handler."""

    config: CliConfig
    client: APIClient

    @classmethod
    def from_config(cls, config: CliConfig) -> "CliState":
        return cls(config=config, client=APIClient(config.server_url, timeout=config.timeout))

    @property
    def server_url(self) -> str:
        return self.config.server_url

    def reconfigure(self, config: CliConfig) -> None:
        """Point the state (and its client) at a new configuration."""
        self.config = config
        self.client.reset(base_url=config.server_url, timeout=config.timeout)

    def run(self, operation: Coroutine[Any, Any, None]) -> None:
        """
        Run a command's async implementation to completion.

        ArchitectErrors become a red error line and exit code 1; anything
        else propagates. The HTTP client is closed either way.
        """
        async def _runner() -> None:
            try:
                await operation
            finally:
                await self.client.close()

        try:
            asyncio.run(_runner())
        except ArchitectError as e:
            output.error(e.message)
            raise typer.Exit(1) from e


def get_state(ctx: typer.Context) -> CliState:
    """Return the CliState stored on the root context."""
    state = ctx.find_object(CliState)
    if state is None:
        raise RuntimeError("CLI state not initialized; commands must run under the root app")
    return state
