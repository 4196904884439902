"""Project commands for vibecode.

This module provides the commands that work on a project description:
- resolve: Show which profiles apply and why
- generate: Resolve, synthesize and write the three artifacts
- route: Suggest profiles for a single task
- init: Write a default vibecode.toml
"""

import json
import logging

import click
from rich.console import Console
from rich.table import Table

from vibecode.artifact_writer import plan_artifacts, write_artifacts
from vibecode.commands.cli_helpers import agents_dir_option, fail, load_command_context
from vibecode.config_manager import ConfigManager, VibecodeConfig, load_project_file
from vibecode.content_synthesizer import synthesize
from vibecode.exceptions import VibecodeError
from vibecode.resolution_engine import resolve
from vibecode.task_router import plan_route

logger = logging.getLogger(__name__)
console = Console()


@click.command(name="resolve")
@click.argument("project_file", type=click.Path(dir_okay=False))
@agents_dir_option
@click.option("--json", "as_json", is_flag=True, help="Print the selection as JSON")
@click.pass_context
def resolve_command(ctx: click.Context, project_file: str, agents_dir: str | None, as_json: bool):
    """Show the active profiles for a project description.

    PROJECT_FILE is a YAML file with type, dimensions, features and
    optional overrides.

    \b
    Examples:
        vibecode resolve project.yaml
        vibecode resolve project.yaml --json
    """
    try:
        command_ctx = load_command_context(ctx, agents_dir)
        description = load_project_file(project_file)
        selection = resolve(description, command_ctx.registry, command_ctx.rules)
    except VibecodeError as e:
        fail(e)

    if as_json:
        click.echo(json.dumps(selection.to_dict(), indent=2))
        return

    table = Table(title=f"Active Profiles ({len(selection)})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Profile", style="green", no_wrap=True)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Reasons")

    for idx, profile_id in enumerate(selection.active_profiles, 1):
        name = command_ctx.registry[profile_id].display_name if profile_id in command_ctx.registry else "-"
        table.add_row(str(idx), profile_id, name, ", ".join(selection.reasons[profile_id]))

    console.print(table)

    for profile_id, reason in sorted(selection.suppressed.items()):
        click.echo(f"  dropped {profile_id}: {reason}")


@click.command(name="generate")
@click.argument("project_file", type=click.Path(dir_okay=False))
@agents_dir_option
@click.option("--output-dir", type=click.Path(file_okay=False), help="Directory to write artifacts into")
@click.option("--dry-run", is_flag=True, help="Show what would be written without writing")
@click.option("--force", is_flag=True, help="Overwrite existing artifacts")
@click.pass_context
def generate_command(
    ctx: click.Context,
    project_file: str,
    agents_dir: str | None,
    output_dir: str | None,
    dry_run: bool,
    force: bool,
):
    """Generate rules, context and prompt documents for a project.

    Writes .cursorrules, .cursor/context.md and .cursor/composer-prompts.md.
    Nothing is written if resolution or synthesis fails.

    \b
    Examples:
        vibecode generate project.yaml
        vibecode generate project.yaml --output-dir ./my-app --force
        vibecode generate project.yaml --dry-run
    """
    try:
        command_ctx = load_command_context(ctx, agents_dir)
        description = load_project_file(project_file)
        selection = resolve(description, command_ctx.registry, command_ctx.rules)
        artifacts = synthesize(
            selection, command_ctx.registry, description, command_ctx.config.rule_options
        )

        destination = output_dir or str(command_ctx.config.output_path)
        if dry_run:
            targets = plan_artifacts(artifacts, destination, overwrite=force)
            click.echo(f"Would write {len(targets)} files for {len(selection)} profiles:")
            for artifact, target in zip(artifacts, targets, strict=True):
                click.echo(f"  {target} ({len(artifact.content)} bytes)")
            return

        written = write_artifacts(artifacts, destination, overwrite=force)
    except VibecodeError as e:
        fail(e)

    click.echo(f"Generated {len(written)} files for {len(selection)} profiles:")
    for path in written:
        click.echo(f"  {path}")


@click.command(name="route")
@click.argument("task", type=str)
@click.option("--file", "files", multiple=True, help="File touched by the task (repeatable)")
@click.option("--chain", help="Use a predefined chain (e.g. feature-development, bug-fix)")
@click.option("--plan", "show_plan", is_flag=True, help="Show execution phases")
@click.option("--sequential", is_flag=True, help="Never mark phases as parallel")
@click.option("--json", "as_json", is_flag=True, help="Print the route plan as JSON")
@agents_dir_option
@click.pass_context
def route_command(
    ctx: click.Context,
    task: str,
    files: tuple[str, ...],
    chain: str | None,
    show_plan: bool,
    sequential: bool,
    as_json: bool,
    agents_dir: str | None,
):
    """Suggest which profiles to consult for a task.

    Prints one profile id per line, dependencies first. With --plan or
    --chain, prints the execution phases instead.

    \b
    Examples:
        vibecode route "add stripe billing to checkout"
        vibecode route "fix flaky test" --file src/components/Nav.test.tsx
        vibecode route "add login with tests" --plan
        vibecode route "checkout crashes" --chain bug-fix
    """
    try:
        command_ctx = load_command_context(ctx, agents_dir)
        route_plan = plan_route(
            task,
            command_ctx.registry,
            files,
            command_ctx.rules,
            chain=chain,
            parallel=not sequential,
        )
    except VibecodeError as e:
        fail(e)

    if as_json:
        click.echo(json.dumps(route_plan.to_dict(), indent=2))
        return

    if not (show_plan or chain):
        for profile_id in route_plan.profiles:
            click.echo(profile_id)
        return

    if route_plan.chain:
        click.echo(f"Chain: {route_plan.chain}")
    for idx, phase in enumerate(route_plan.phases, 1):
        mode = "parallel" if phase.parallel else "sequential"
        click.echo(f"Phase {idx} ({mode}): {', '.join(phase.profiles)}")


@click.command(name="init")
@click.option("--force", is_flag=True, help="Update an existing vibecode.toml")
@click.pass_context
def init_command(ctx: click.Context, force: bool):
    """Write a default vibecode.toml in the current directory.

    \b
    Examples:
        vibecode init
    """
    obj = ctx.find_root().obj or {}
    try:
        path = ConfigManager.save_config(VibecodeConfig(), obj.get("config_path"), overwrite=force)
    except VibecodeError as e:
        fail(e)

    click.echo(f"Wrote {path}")
