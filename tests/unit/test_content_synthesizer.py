"""Unit tests for content_synthesizer module."""

import pytest

from vibecode import content_library as lib
from vibecode.content_synthesizer import (
    CONTEXT_DOCUMENT_NAME,
    PROMPT_DOCUMENT_NAME,
    RULES_DOCUMENT_NAME,
    assemble_context_document,
    assemble_prompt_document,
    assemble_rules_document,
    extract_summary,
    synthesize,
    truncate_summary,
)
from vibecode.exceptions import SynthesisError, UnknownValueError
from vibecode.models import ProjectDescription, ProjectType, SelectionResult
from vibecode.profile_registry import load_registry
from vibecode.resolution_engine import resolve


def _selection(*ids):
    return SelectionResult(active_profiles=ids, reasons={pid: ("core",) for pid in ids})


class TestExtractSummary:
    """Tests for extract_summary."""

    def test_skips_headings_and_blanks(self):
        """Test that the first plain line is captured."""
        text = "# Frontend Agent\n\n## Overview\n\nBuilds accessible interfaces.\nMore text.\n"
        assert extract_summary(text) == "Builds accessible interfaces."

    def test_strips_whitespace(self):
        """Test that captured lines are trimmed."""
        assert extract_summary("\n   Indented summary   \n") == "Indented summary"

    def test_crlf_line_endings(self):
        """Test that carriage returns do not leak into the summary."""
        assert extract_summary("# Title\r\n\r\nSummary line\r\n") == "Summary line"

    def test_indented_heading_is_skipped(self):
        """Test that headings are recognized after trimming."""
        assert extract_summary("   ## Heading\nBody") == "Body"

    def test_only_headings(self):
        """Test that a text with no plain line has no summary."""
        assert extract_summary("# Title\n\n## Section\n") is None

    def test_empty_text(self):
        """Test that empty text has no summary."""
        assert extract_summary("") is None

    def test_exactly_max_length(self):
        """Test that a 180 character line is kept whole."""
        line = "a" * 180
        assert extract_summary(f"# T\n{line}\n") == line

    def test_over_max_length(self):
        """Test that a 181 character line is cut to 177 plus an ellipsis."""
        summary = extract_summary("# T\n" + "b" * 181)
        assert summary == "b" * 177 + "..."
        assert len(summary) == 180

    def test_truncate_summary_custom_limit(self):
        """Test truncate_summary with a smaller limit."""
        assert truncate_summary("abcdefgh", limit=6) == "abc..."
        assert truncate_summary("abc", limit=6) == "abc"


class TestRulesDocument:
    """Tests for assemble_rules_document."""

    def test_sections_follow_selection_order(self, registry):
        """Test one section per active profile in selection order."""
        document = assemble_rules_document(_selection("testing", "frontend"), registry)

        assert document.startswith("# Cursor IDE Rules")
        assert "Active Agents: 2" in document
        testing = document.index("### Testing\nTesting specialist guidance for this project.\n")
        frontend = document.index("### Frontend\nFrontend specialist guidance for this project.\n")
        assert testing < frontend

    def test_placeholder_for_missing_summary(self, make_catalog):
        """Test that a profile with only headings gets the placeholder."""
        registry = load_registry(make_catalog({"frontend": "# Frontend Agent\n\n## Notes\n"}))
        document = assemble_rules_document(_selection("frontend"), registry)
        assert f"### Frontend\n{lib.SUMMARY_PLACEHOLDER}\n" in document

    def test_front_matter_not_used_as_summary(self, make_catalog):
        """Test that the summary comes from the body, not the front matter."""
        registry = load_registry(
            make_catalog({"frontend": "---\nkeywords: [tailwind]\n---\n# Frontend\n\nReal summary.\n"})
        )
        document = assemble_rules_document(_selection("frontend"), registry)
        assert "### Frontend\nReal summary.\n" in document

    def test_default_options(self, registry):
        """Test that git, testing and security guidelines are included by default."""
        document = assemble_rules_document(_selection("testing"), registry)
        assert "## Git Workflow" in document
        assert "## Testing Guidelines" in document
        assert "## Security Best Practices" in document
        assert "## Performance Guidelines" not in document

    def test_options_use_canonical_order(self, registry):
        """Test that option sections are ordered regardless of request order."""
        document = assemble_rules_document(_selection("testing"), registry, ["docs", "performance"])
        assert document.index("## Performance Guidelines") < document.index("## Documentation Standards")
        assert "## Git Workflow" not in document

    def test_unknown_option(self, registry):
        """Test that an unknown option is rejected."""
        with pytest.raises(UnknownValueError) as exc_info:
            assemble_rules_document(_selection("testing"), registry, ["style"])
        assert exc_info.value.dimension == "rule_options"
        assert exc_info.value.value == "style"

    def test_activation_tables_filtered(self, registry):
        """Test that file and task tables only mention active profiles."""
        document = assemble_rules_document(_selection("frontend", "testing"), registry)

        assert "- **UI/Component Development**: frontend" in document
        assert "- **Testing**: testing" in document
        assert "*.swift" not in document
        assert "**Deployment**" not in document

    def test_missing_profile(self, registry):
        """Test that a selection naming an unknown profile fails."""
        with pytest.raises(SynthesisError) as exc_info:
            assemble_rules_document(_selection("testing", "quantum"), registry)
        assert exc_info.value.kind == SynthesisError.MISSING_PROFILE
        assert exc_info.value.profile_id == "quantum"


class TestContextDocument:
    """Tests for assemble_context_document."""

    def test_project_facts(self):
        """Test that type, dimensions and features are listed."""
        description = ProjectDescription(
            type=ProjectType.WEB,
            dimensions={"backend": "supabase", "frontend": "react"},
            features={"payments": True, "email": False},
        )
        document = assemble_context_document(_selection("frontend", "payment"), description)

        assert "- **Type**: web" in document
        assert document.index("- **Frontend**: react") < document.index("- **Backend**: supabase")
        assert "- **Features**: payments" in document
        assert "- **Agents**: 2 specialized agents configured" in document

    def test_no_features(self):
        """Test the features line when nothing is enabled."""
        document = assemble_context_document(_selection("testing"), ProjectDescription(type=ProjectType.CLI))
        assert "- **Features**: none" in document

    def test_agents_and_specializations(self):
        """Test agent references and specialization fallbacks."""
        document = assemble_context_document(
            _selection("frontend", "payment"), ProjectDescription(type=ProjectType.WEB)
        )
        assert "- **Frontend**: @frontend" in document
        assert f"Specializes in: {lib.SPECIALIZATIONS['frontend']}" in document
        assert f"**Payment**\nSpecializes in: {lib.DEFAULT_SPECIALIZATION}" in document


class TestPromptDocument:
    """Tests for assemble_prompt_document."""

    def test_prompts_filtered_to_active_profiles(self):
        """Test that prompts for inactive profiles are dropped."""
        document = assemble_prompt_document(_selection("frontend", "testing"), ProjectType.WEB)

        assert "## Quick Start Prompts for web Projects" in document
        assert "@frontend Create a responsive navigation bar with mobile menu" in document
        assert "@design Design a modern hero section" not in document
        assert "@payment Integrate Stripe" not in document
        assert "@frontend Build checkout flow with payment forms" in document

    def test_empty_blocks_are_dropped(self):
        """Test that blocks and tasks with no active prompts disappear."""
        document = assemble_prompt_document(_selection("documentation"), ProjectType.WEB)

        assert "### Common Tasks" not in document
        assert "### Code Quality" in document
        assert "### Payment Integration" not in document
        assert "## Multi-Agent Workflows" not in document

    def test_workflow_steps_renumbered(self):
        """Test that remaining workflow steps are numbered from one."""
        document = assemble_prompt_document(_selection("backend", "testing"), ProjectType.API)

        assert "## Quick Start Prompts for backend Projects" in document
        assert "Step 1: @backend Create profile API endpoints\nStep 2: @testing Write comprehensive tests" in document

    def test_single_step_workflow_dropped(self):
        """Test that a workflow left with one step is omitted."""
        document = assemble_prompt_document(_selection("testing"), ProjectType.WEB)
        assert "Complete Feature" not in document

    def test_template_per_type(self):
        """Test that mobile projects use the mobile prompts."""
        document = assemble_prompt_document(_selection("flutter"), ProjectType.MOBILE)
        assert "@flutter Build onboarding screens" in document
        assert "@mobile Create onboarding screens" not in document


class TestSynthesize:
    """Tests for synthesize."""

    def test_artifact_names(self, registry):
        """Test that three artifacts are produced in a fixed order."""
        description = ProjectDescription(type=ProjectType.WEB)
        artifacts = synthesize(resolve(description, registry), registry, description)

        assert [a.name for a in artifacts] == [
            RULES_DOCUMENT_NAME,
            CONTEXT_DOCUMENT_NAME,
            PROMPT_DOCUMENT_NAME,
        ]
        assert all(a.content for a in artifacts)

    def test_deterministic(self, registry):
        """Test that identical inputs give byte-identical artifacts."""
        description = ProjectDescription(
            type=ProjectType.FULLSTACK,
            dimensions={"frontend": "nextjs", "backend": "supabase"},
            features={"payments": True},
        )
        selection = resolve(description, registry)
        assert synthesize(selection, registry, description) == synthesize(selection, registry, description)

    def test_registry_drift(self, make_catalog):
        """Test that a profile missing from the registry fails before any output."""
        registry = load_registry(make_catalog({"documentation": None, "security": None, "testing": None}))
        description = ProjectDescription(type=ProjectType.WEB)
        selection = resolve(description, registry)

        with pytest.raises(SynthesisError) as exc_info:
            synthesize(selection, registry, description)
        assert exc_info.value.profile_id == "design"
