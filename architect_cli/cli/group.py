"""
Command Group.

TyperGroup subclass shared by every command group:

- an unknown subcommand prints a short error plus a help hint and exits
  with code 1 (Click's default is a usage error with exit code 2);
- a group invoked without a subcommand prints its help and exits with
  code 0, the same as the bare root command.
"""

import click
import typer
from rich.text import Text
from typer.core import TyperGroup

from architect_cli.cli import output


def print_help(ctx: click.Context) -> None:
    """Print a command's help. Rich help is written directly and returns no text."""
    help_text = ctx.get_help()
    if help_text:
        typer.echo(help_text)


class ArchitectGroup(TyperGroup):
    """Typer group with friendlier bare-group and unknown-command handling."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        if not args and self.no_args_is_help and not ctx.resilient_parsing:
            print_help(ctx)
            ctx.exit(0)
        return super().parse_args(ctx, args)

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        cmd_name = args[0] if args else None
        if (
            cmd_name
            and not cmd_name.startswith("-")
            and not ctx.resilient_parsing
            and self.get_command(ctx, cmd_name) is None
        ):
            output.error(f"Unknown command: {cmd_name}")
            output.console.print(
                Text.assemble("Run ", (f"{ctx.command_path} --help", "cyan"), " for available commands"),
                soft_wrap=True,
            )
            ctx.exit(1)
        return super().resolve_command(ctx, args)
