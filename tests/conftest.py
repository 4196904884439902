"""
Shared test fixtures and configuration for vibecode tests.

This module provides common fixtures used across all test types:
- Temporary agent catalogs built from the default rule tables
- Loaded registries
- Project description files
"""

from pathlib import Path

import pytest

from vibecode.profile_registry import display_name_for, load_registry
from vibecode.rule_tables import DEFAULT_RULES

# ============================================================================
# CATALOG FIXTURES
# ============================================================================


def _profile_text(profile_id: str) -> str:
    name = display_name_for(profile_id)
    return f"# {name} Agent\n\n{name} specialist guidance for this project.\n\n## Rules\n\n- Rule one\n"


@pytest.fixture
def make_catalog(tmp_path):
    """Factory writing ``{id: text}`` as ``<id>-agent.md`` files.

    A text of None uses a generated heading-plus-summary body.
    """

    def _make(profiles: dict[str, str | None], name: str = "agents") -> Path:
        directory = tmp_path / name
        directory.mkdir(parents=True, exist_ok=True)
        for profile_id, text in profiles.items():
            body = _profile_text(profile_id) if text is None else text
            (directory / f"{profile_id}-agent.md").write_text(body, encoding="utf-8")
        return directory

    return _make


@pytest.fixture
def agents_dir(make_catalog):
    """Catalog covering every profile id the default rules can activate.

    Also contains a README.md that is not a profile and must be skipped.
    """
    directory = make_catalog(dict.fromkeys(sorted(DEFAULT_RULES.referenced_profiles())))
    (directory / "README.md").write_text("# Agents\n", encoding="utf-8")
    return directory


@pytest.fixture
def registry(agents_dir):
    """Registry loaded from the default catalog."""
    return load_registry(agents_dir)


# ============================================================================
# PROJECT FIXTURES
# ============================================================================


@pytest.fixture
def project_file(tmp_path):
    """Factory writing a YAML project description and returning its path."""

    def _write(content: str, name: str = "project.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def web_project_yaml():
    """Web project on React and Supabase with authentication."""
    return (
        "type: web\n"
        "dimensions:\n"
        "  frontend: react\n"
        "  backend: supabase\n"
        "features:\n"
        "  authentication: true\n"
    )
