"""CLI entry point for vibecode.

Commands:
    vibecode agents list        # List profiles in the catalog
    vibecode agents export      # Export the catalog index as JSON
    vibecode resolve FILE       # Show active profiles for a project
    vibecode generate FILE      # Write rules, context and prompt documents
    vibecode route "TASK"       # Suggest profiles for a task
    vibecode init               # Write a default vibecode.toml
"""

import logging

import click

from vibecode import __version__
from vibecode.click_group import VibecodeGroup
from vibecode.commands import (
    agents_group,
    generate_command,
    init_command,
    resolve_command,
    route_command,
)

logger = logging.getLogger(__name__)


@click.group(cls=VibecodeGroup, invoke_without_command=True)
@click.option("--config", help="Config file path (default: ./vibecode.toml)", type=str)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, config: str | None, verbose: bool) -> None:
    """vibecode - pick the agent profiles a project needs.

    Resolves a project description (type, stack dimensions, features)
    against a catalog of *-agent.md profiles and generates a rules
    document, a context summary and a prompt library from the result.

    \b
    EXAMPLES:
        # Show which profiles apply
        $ vibecode resolve project.yaml

        # Generate .cursorrules and .cursor/ documents
        $ vibecode generate project.yaml

        # Ask which profiles to consult for a task
        $ vibecode route "add stripe checkout"

    \b
    CONFIGURATION:
        Config file: ./vibecode.toml
        Keys: agents_dir, output_dir, rule_options, core_profiles, rules_file

    For help on any command: vibecode <command> --help
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


main.add_command(agents_group)
main.add_command(resolve_command)
main.add_command(generate_command)
main.add_command(route_command)
main.add_command(init_command)


if __name__ == "__main__":
    main()
