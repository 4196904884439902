"""Shared helper functions for CLI commands.

Functions in this module load the configuration, rule set and catalog the
same way for every command, and turn vibecode errors into a clean exit.
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import NoReturn

import click

from vibecode.config_manager import ConfigManager, VibecodeConfig
from vibecode.exceptions import VibecodeError
from vibecode.profile_registry import ProfileRegistry, load_registry
from vibecode.rule_tables import RuleSet

logger = logging.getLogger(__name__)


@dataclass
class CommandContext:
    """Everything a command needs to resolve and synthesize."""

    config: VibecodeConfig
    rules: RuleSet
    registry: ProfileRegistry


def fail(error: Exception) -> NoReturn:
    """Print an error and exit without producing any output files."""
    if isinstance(error, VibecodeError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(error.exit_code)
    click.echo(f"Unexpected error: {error}", err=True)
    logger.debug("Unexpected error", exc_info=True)
    sys.exit(1)


def load_command_context(ctx: click.Context, agents_dir: str | None = None) -> CommandContext:
    """Load config, rules and registry for a command.

    Args:
        ctx: Click context carrying the --config path
        agents_dir: Override for the configured agents directory

    Raises:
        VibecodeError: If any of the three cannot be loaded
    """
    obj = ctx.find_root().obj or {}
    config = ConfigManager.load_config(obj.get("config_path"))
    if agents_dir:
        # Command-line paths are relative to the working directory
        config.agents_dir = str(Path(agents_dir).expanduser().resolve())

    rules = config.load_rule_set()
    registry = load_registry(config.agents_path, rules=rules, max_workers=config.max_workers)
    logger.debug(f"Using {len(registry)} profiles from {config.agents_path}")
    return CommandContext(config=config, rules=rules, registry=registry)


agents_dir_option = click.option(
    "--agents-dir",
    type=click.Path(file_okay=False),
    help="Directory of *-agent.md profiles (overrides agents_dir in vibecode.toml)",
)
