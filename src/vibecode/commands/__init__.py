"""Command groups for vibecode CLI."""

from vibecode.commands.agents import agents_group
from vibecode.commands.project import generate_command, init_command, resolve_command, route_command

__all__ = ["agents_group", "generate_command", "init_command", "resolve_command", "route_command"]
