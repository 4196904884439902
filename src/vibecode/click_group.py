"""Custom Click group with automatic help display on errors.

This module provides a custom Click Group class that automatically
displays contextual help when syntax errors occur.
"""

import sys
from typing import Any

import click

_USAGE_ERRORS = (
    click.exceptions.UsageError,
    click.exceptions.BadParameter,
    click.exceptions.MissingParameter,
)


def _exit_code(error: click.exceptions.ClickException) -> int:
    return error.exit_code if hasattr(error, "exit_code") else 1


class VibecodeGroup(click.Group):
    """Custom Click group that auto-displays help on usage errors."""

    def main(self, *args: Any, **kwargs: Any) -> Any:
        """Override main to auto-display help on errors raised during parsing."""
        try:
            return super().main(*args, **kwargs)
        except _USAGE_ERRORS as e:
            click.echo(f"Error: {e.format_message()}", err=True)

            ctx = e.ctx if hasattr(e, "ctx") and e.ctx else None
            if ctx:
                click.echo("")
                click.echo(ctx.get_help())
                # Use ctx.exit() to properly handle Click's testing mode
                ctx.exit(_exit_code(e))
                return None
            sys.exit(_exit_code(e))

    def invoke(self, ctx: click.Context) -> Any:
        """Handle errors with auto-help for the most specific context."""
        try:
            return super().invoke(ctx)
        except _USAGE_ERRORS as e:
            click.echo(f"Error: {e.format_message()}", err=True)

            # Prefer the subcommand context if available
            error_ctx = e.ctx if hasattr(e, "ctx") and e.ctx else ctx

            click.echo("")
            click.echo(error_ctx.get_help())
            error_ctx.exit(_exit_code(e))
            return None

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        """Override to show help when command is not found."""
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            # Let parameter errors propagate to invoke()
            if isinstance(e, click.exceptions.MissingParameter | click.exceptions.BadParameter):
                raise
            click.echo(f"Error: {e.format_message()}", err=True)
            click.echo("")
            click.echo(ctx.get_help())
            ctx.exit(1)
            return None, None, []


# Subgroups created with @main.group() also use VibecodeGroup
VibecodeGroup.group_class = VibecodeGroup
