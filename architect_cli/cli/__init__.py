"""
CLI Client Module.

Command-line client built with Typer for communicating with the
Architect server's REST API.

Architecture:
- CLI is a thin presentation layer
- All state lives on the server
- CLI calls the server via HTTP (httpx), one or two requests per command
- Responses are validated with pydantic and rendered with Rich

Usage:
    architect --help
    architect status
    architect tools list --active
    architect marketplace search weather
    architect server logs -n 20
"""
