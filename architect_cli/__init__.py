"""
Architect CLI.

Manage an Architect MCP server from the terminal: browse and reload tools,
work with the tool marketplace, and inspect server state (audit logs,
cache, schedules, webhooks, pipelines, secrets).
"""

__version__ = "0.2.0"
