"""
CLI Commands.

Organized by the server area each group talks to.
"""

from architect_cli.cli.commands.marketplace import app as marketplace_app
from architect_cli.cli.commands.server import app as server_app
from architect_cli.cli.commands.tools import app as tools_app

__all__ = [
    "marketplace_app",
    "server_app",
    "tools_app",
]
