"""Content synthesizer for generated agent artifacts.

Renders three text artifacts from a resolved selection:
- Rules document (.cursorrules): one section per active profile
- Context document (.cursor/context.md): project facts and active profiles
- Prompt document (.cursor/composer-prompts.md): prompts for active profiles

Determinism:
- Output depends only on the selection, registry contents and project
  description; there are no timestamps and no unordered iteration
- Every artifact is returned fully assembled; persisting it is the job of
  vibecode.artifact_writer

Public API:
    extract_summary: First non-heading line of a profile, truncated
    assemble_rules_document / assemble_context_document / assemble_prompt_document
    synthesize: All three artifacts with their suggested names
"""

import logging
from collections.abc import Iterable
from enum import Enum

from vibecode import content_library as lib
from vibecode.exceptions import SynthesisError, UnknownValueError
from vibecode.models.project_models import DIMENSIONS, ProjectDescription, ProjectType
from vibecode.models.selection_models import Artifact, SelectionResult
from vibecode.profile_registry import ProfileRegistry, display_name_for

logger = logging.getLogger(__name__)

SUMMARY_MAX_LENGTH = 180
ELLIPSIS = "..."
HEADING_MARKER = "#"

RULES_DOCUMENT_NAME = ".cursorrules"
CONTEXT_DOCUMENT_NAME = ".cursor/context.md"
PROMPT_DOCUMENT_NAME = ".cursor/composer-prompts.md"

DEFAULT_RULE_OPTIONS = ("git", "testing", "security")


class _LineKind(Enum):
    BLANK = "blank"
    HEADING = "heading"
    TEXT = "text"


class _ScanState(Enum):
    SKIP_BLANK = "skip-blank"
    SKIP_HEADING = "skip-heading"
    CAPTURE = "capture"


# Next state for each line kind; CAPTURE is terminal
_TRANSITIONS = {
    _LineKind.BLANK: _ScanState.SKIP_BLANK,
    _LineKind.HEADING: _ScanState.SKIP_HEADING,
    _LineKind.TEXT: _ScanState.CAPTURE,
}


def _classify(line: str) -> _LineKind:
    if not line:
        return _LineKind.BLANK
    if line.startswith(HEADING_MARKER):
        return _LineKind.HEADING
    return _LineKind.TEXT


def truncate_summary(line: str, limit: int = SUMMARY_MAX_LENGTH) -> str:
    """Cap a line at ``limit`` characters, ending in an ellipsis when cut."""
    if len(line) <= limit:
        return line
    return line[: limit - len(ELLIPSIS)] + ELLIPSIS


def extract_summary(text: str) -> str | None:
    """Extract a one-line summary from a profile's text.

    Scans line by line, skipping blank lines and heading lines, and captures
    the first remaining line (stripped). Lines longer than 180 characters
    keep their first 177 characters followed by "...".

    Args:
        text: Raw profile text

    Returns:
        Summary line, or None if the text holds only blanks and headings

    Examples:
        >>> extract_summary("# Frontend Agent\\n\\nBuilds accessible UIs.\\n")
        'Builds accessible UIs.'
        >>> extract_summary("# Only a heading\\n") is None
        True
    """
    state = _ScanState.SKIP_BLANK
    for raw in text.split("\n"):
        line = raw.strip()
        state = _TRANSITIONS[_classify(line)]
        if state is _ScanState.CAPTURE:
            return truncate_summary(line)
    return None


def _require_profiles(selection: SelectionResult, registry: ProfileRegistry) -> None:
    for profile_id in selection.active_profiles:
        if profile_id not in registry:
            raise SynthesisError(SynthesisError.MISSING_PROFILE, profile_id)


def _active(ids: Iterable[str], selection: SelectionResult) -> list[str]:
    return [pid for pid in ids if pid in selection]


def _ordered_options(options: Iterable[str]) -> list[str]:
    requested = set(options)
    unknown = sorted(requested - set(lib.RULE_OPTION_SECTIONS))
    if unknown:
        raise UnknownValueError("rule_options", unknown[0], lib.RULE_OPTION_SECTIONS)
    return [name for name in lib.RULE_OPTION_SECTIONS if name in requested]


def assemble_rules_document(
    selection: SelectionResult,
    registry: ProfileRegistry,
    options: Iterable[str] = DEFAULT_RULE_OPTIONS,
) -> str:
    """Render the combined rules document.

    Args:
        selection: Resolved selection
        registry: Profile catalog the selection was resolved against
        options: Optional guideline sections to append (git, testing,
            security, performance, accessibility, docs)

    Returns:
        Rules document text

    Raises:
        SynthesisError: If an active profile is missing from the registry
        UnknownValueError: If an option name is not recognized
    """
    _require_profiles(selection, registry)
    option_names = _ordered_options(options)

    parts = [lib.RULES_PREAMBLE, f"Active Agents: {len(selection)}\n", "## Agent Instructions\n"]

    for profile_id in selection.active_profiles:
        descriptor = registry[profile_id]
        summary = extract_summary(registry.text_for(profile_id))
        if summary is None:
            logger.debug(f"No summary line in {descriptor.source_location}, using placeholder")
            summary = lib.SUMMARY_PLACEHOLDER
        parts.append(f"### {descriptor.display_name}\n{summary}\n")

    for name in option_names:
        title, items = lib.RULE_OPTION_SECTIONS[name]
        bullets = "\n".join(f"- {item}" for item in items)
        parts.append(f"## {title}\n{bullets}\n")

    file_rows = []
    for pattern, ids in lib.FILE_PATTERN_GUIDE:
        active = _active(ids, selection)
        if active:
            file_rows.append(f"- **{pattern}**: Apply {', '.join(active)} guidelines")
    if file_rows:
        parts.append(
            "## File-Based Agent Activation\n\n"
            "When working on specific file types, follow these agent guidelines:\n\n"
            + "\n".join(file_rows)
            + "\n"
        )

    task_rows = []
    for task, ids in lib.TASK_GUIDE:
        active = _active(ids, selection)
        if active:
            task_rows.append(f"- **{task}**: {', '.join(active)}")
    if task_rows:
        parts.append(
            "## Task-Based Agent Selection\n\n"
            "For specific tasks, consult these agents:\n\n" + "\n".join(task_rows) + "\n"
        )

    parts.append(lib.RULES_FOOTER)
    return "\n".join(parts)


def assemble_context_document(
    selection: SelectionResult, description: ProjectDescription
) -> str:
    """Render the project context document.

    Args:
        selection: Resolved selection
        description: Project the selection was resolved for

    Returns:
        Context document text
    """
    facts = [f"- **Type**: {description.type.value}"]
    for dimension in DIMENSIONS:
        if dimension in description.dimensions:
            facts.append(f"- **{dimension.capitalize()}**: {description.dimensions[dimension]}")
    features = description.enabled_features()
    facts.append(f"- **Features**: {', '.join(features) if features else 'none'}")
    facts.append(f"- **Agents**: {len(selection)} specialized agents configured")

    agents = [f"- **{display_name_for(pid)}**: @{pid}" for pid in selection.active_profiles]

    specializations = []
    for pid in selection.active_profiles:
        focus = lib.SPECIALIZATIONS.get(pid, lib.DEFAULT_SPECIALIZATION)
        specializations.append(f"**{display_name_for(pid)}**\nSpecializes in: {focus}\nReference: @{pid}\n")

    return (
        "# Cursor Project Context\n\n"
        "## Project Information\n"
        + "\n".join(facts)
        + "\n\n## Active Agents\n\n"
        + "\n".join(agents)
        + "\n\n## Agent Specializations\n\n"
        + "\n".join(specializations)
        + "\n"
        + lib.CONTEXT_USAGE
    )


def _prompt_lines(prompts: Iterable[tuple[str, str]], selection: SelectionResult) -> list[str]:
    return [f"@{pid} {text}" for pid, text in prompts if pid in selection]


def assemble_prompt_document(selection: SelectionResult, project_type: ProjectType) -> str:
    """Render the prompt library for a project type.

    Only prompts whose referenced profile is active are kept; blocks left
    with no prompts are dropped entirely.

    Args:
        selection: Resolved selection
        project_type: Project type selecting the prompt template

    Returns:
        Prompt document text
    """
    template = lib.TEMPLATE_FOR_TYPE[project_type.value]
    sections = [
        "# Cursor Composer Prompts\n",
        f"## Quick Start Prompts for {template} Projects\n\n"
        "Copy and paste these prompts into Cursor Composer for common tasks:\n",
    ]

    common = _prompt_lines(lib.TEMPLATE_PROMPTS[template], selection)
    if common:
        sections.append("### Common Tasks\n\n```\n" + "\n".join(common) + "\n```\n")

    blocks = []
    for title, prompts in lib.PROMPT_BLOCKS:
        lines = _prompt_lines(prompts, selection)
        if lines:
            blocks.append(f"### {title}\n```\n" + "\n".join(lines) + "\n```\n")
    if blocks:
        sections.append("## Feature Development\n\n" + "\n".join(blocks))

    workflows = []
    for title, steps in lib.WORKFLOWS:
        lines = _prompt_lines(steps, selection)
        if len(lines) > 1:
            numbered = [f"Step {idx}: {line}" for idx, line in enumerate(lines, 1)]
            workflows.append(f"### {title}\n```\n" + "\n".join(numbered) + "\n```\n")
    if workflows:
        sections.append("## Multi-Agent Workflows\n\n" + "\n".join(workflows))

    sections.append(lib.PROMPT_TIPS)
    sections.append(f"---\n\n*These prompts are tailored to {template} projects with your selected agents.*\n")
    return "\n".join(sections)


def synthesize(
    selection: SelectionResult,
    registry: ProfileRegistry,
    description: ProjectDescription,
    options: Iterable[str] = DEFAULT_RULE_OPTIONS,
) -> list[Artifact]:
    """Render all three artifacts.

    The registry check runs before anything is assembled, so a drifted
    selection never yields a partial artifact set.

    Returns:
        Rules, context and prompt artifacts, in that order

    Raises:
        SynthesisError: If an active profile is missing from the registry
        UnknownValueError: If an option name is not recognized
    """
    _require_profiles(selection, registry)
    artifacts = [
        Artifact(RULES_DOCUMENT_NAME, assemble_rules_document(selection, registry, options)),
        Artifact(CONTEXT_DOCUMENT_NAME, assemble_context_document(selection, description)),
        Artifact(PROMPT_DOCUMENT_NAME, assemble_prompt_document(selection, description.type)),
    ]
    logger.debug(f"Synthesized {len(artifacts)} artifacts for {len(selection)} profiles")
    return artifacts


__all__ = [
    "CONTEXT_DOCUMENT_NAME",
    "DEFAULT_RULE_OPTIONS",
    "PROMPT_DOCUMENT_NAME",
    "RULES_DOCUMENT_NAME",
    "SUMMARY_MAX_LENGTH",
    "assemble_context_document",
    "assemble_prompt_document",
    "assemble_rules_document",
    "extract_summary",
    "synthesize",
    "truncate_summary",
]
