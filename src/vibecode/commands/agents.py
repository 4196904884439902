"""Agents command group for vibecode.

This module provides CLI commands for inspecting the profile catalog:
- list: Show every registered profile with its summary
- export: Write the catalog index as JSON
"""

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from vibecode.commands.cli_helpers import agents_dir_option, fail, load_command_context
from vibecode.content_synthesizer import extract_summary
from vibecode.exceptions import VibecodeError
from vibecode.profile_registry import ProfileRegistry

logger = logging.getLogger(__name__)
console = Console()


@click.group(name="agents")
def agents_group():
    """Inspect the agent profile catalog.

    Profiles are *-agent.md files in the configured agents directory
    (agents_dir in vibecode.toml, default docs/agents).

    \b
    SUBCOMMANDS:
        list     List all profiles
        export   Export the catalog index as JSON

    \b
    EXAMPLES:
        $ vibecode agents list
        $ vibecode agents list --agents-dir ./claude-starter/docs/agents
        $ vibecode agents export --output registry.json
    """
    pass


def build_catalog_index(registry: ProfileRegistry) -> dict:
    """Catalog index with summaries, in registry order.

    Contains no timestamps so repeated exports are identical.
    """
    agents = []
    for descriptor in registry.descriptors():
        entry = descriptor.to_dict()
        entry["summary"] = extract_summary(registry.text_for(descriptor.id))
        agents.append(entry)
    return {"agents": agents}


@agents_group.command(name="list")
@agents_dir_option
@click.pass_context
def agents_list(ctx: click.Context, agents_dir: str | None):
    """List all registered agent profiles.

    \b
    Examples:
        vibecode agents list
    """
    try:
        registry = load_command_context(ctx, agents_dir).registry
    except VibecodeError as e:
        fail(e)

    if not len(registry):
        click.echo("No agent profiles found.")
        click.echo("\nAdd *-agent.md files to your agents directory.")
        return

    table = Table(title=f"Agent Profiles ({len(registry)})")
    table.add_column("ID", style="green", no_wrap=True)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Group", style="yellow")
    table.add_column("Summary")

    for descriptor in registry.descriptors():
        summary = extract_summary(registry.text_for(descriptor.id)) or "-"
        table.add_row(descriptor.id, descriptor.display_name, descriptor.mutex_group or "-", summary)

    console.print(table)


@agents_group.command(name="export")
@agents_dir_option
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write JSON to file instead of stdout")
@click.pass_context
def agents_export(ctx: click.Context, agents_dir: str | None, output: str | None):
    """Export the catalog index (ids, names, groups, summaries) as JSON.

    \b
    Examples:
        vibecode agents export
        vibecode agents export --output registry.json
    """
    try:
        registry = load_command_context(ctx, agents_dir).registry
    except VibecodeError as e:
        fail(e)

    payload = json.dumps(build_catalog_index(registry), indent=2) + "\n"

    if not output:
        click.echo(payload, nl=False)
        return

    try:
        output_path = Path(output).expanduser()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(payload, encoding="utf-8")
    except OSError as e:
        fail(e)

    logger.info(f"Exported {len(registry)} agents to {output_path}")
