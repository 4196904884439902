"""Unit tests for project and selection data models."""

import pytest

from vibecode.exceptions import ConfigError, UnknownValueError
from vibecode.models import (
    ExplicitOverrides,
    ProjectDescription,
    ProjectType,
    SelectionResult,
)


class TestProjectType:
    """Tests for ProjectType parsing."""

    def test_parse_normalizes(self):
        """Test case and whitespace are ignored."""
        assert ProjectType.parse(" Web ") is ProjectType.WEB

    def test_parse_unknown(self):
        """Test that unknown types list the allowed values."""
        with pytest.raises(UnknownValueError) as exc_info:
            ProjectType.parse("game")

        error = exc_info.value
        assert error.dimension == "type"
        assert error.value == "game"
        assert "fullstack" in error.allowed


class TestProjectDescription:
    """Tests for ProjectDescription."""

    def test_from_dict(self):
        """Test creation from a parsed project file."""
        description = ProjectDescription.from_dict(
            {
                "type": "web",
                "dimensions": {"frontend": "React", "backend": None},
                "features": {"payments": True, "email": False},
                "overrides": {"include": ["flutter"], "exclude": ["testing"]},
            }
        )

        assert description.type is ProjectType.WEB
        assert description.dimensions == {"frontend": "react", "backend": "none"}
        assert description.enabled_features() == ["payments"]
        assert description.overrides == ExplicitOverrides(include=("flutter",), exclude=("testing",))

    def test_from_dict_minimal(self):
        """Test that only type is required."""
        description = ProjectDescription.from_dict({"type": "cli"})
        assert description.dimensions == {}
        assert description.features == {}
        assert not description.overrides

    def test_missing_type(self):
        """Test that type is required."""
        with pytest.raises(ConfigError, match="Missing required field: type"):
            ProjectDescription.from_dict({"dimensions": {}})

    def test_unknown_field(self):
        """Test that unknown top-level fields fail loudly."""
        with pytest.raises(ConfigError, match="stack"):
            ProjectDescription.from_dict({"type": "web", "stack": "react"})

    def test_non_boolean_feature(self):
        """Test that feature flags must be booleans."""
        with pytest.raises(ConfigError, match="payments"):
            ProjectDescription.from_dict({"type": "web", "features": {"payments": "yes"}})

    def test_override_must_be_list(self):
        """Test that a bare string override is rejected."""
        with pytest.raises(ConfigError, match="overrides.include"):
            ProjectDescription.from_dict({"type": "web", "overrides": {"include": "flutter"}})

    def test_not_a_mapping(self):
        """Test that a list document is rejected."""
        with pytest.raises(ConfigError, match="mapping"):
            ProjectDescription.from_dict(["web"])  # type: ignore[arg-type]

    def test_active_dimensions_skip_none(self):
        """Test that 'none' dimensions are not active."""
        description = ProjectDescription(
            type=ProjectType.WEB, dimensions={"frontend": "react", "mobile": "none"}
        )
        assert description.active_dimensions() == [("frontend", "react")]

    def test_mappings_are_read_only(self):
        """Test that dimensions and features cannot be changed after construction."""
        dimensions = {"frontend": "react"}
        description = ProjectDescription(type=ProjectType.WEB, dimensions=dimensions)

        with pytest.raises(TypeError):
            description.dimensions["backend"] = "supabase"
        with pytest.raises(TypeError):
            description.features["seo"] = True

        dimensions["backend"] = "supabase"
        assert "backend" not in description.dimensions

    def test_hashable(self):
        """Test that descriptions hash regardless of dimension order."""
        first = ProjectDescription(
            type=ProjectType.WEB,
            dimensions={"frontend": "react", "backend": "supabase"},
            features={"seo": True},
        )
        second = ProjectDescription(
            type=ProjectType.WEB,
            dimensions={"backend": "supabase", "frontend": "react"},
            features={"seo": True},
        )
        assert first == second
        assert hash(first) == hash(second)
        assert {first: "cached"}[second] == "cached"

    def test_to_dict_round_trip(self):
        """Test that to_dict output parses back to an equal description."""
        description = ProjectDescription(
            type=ProjectType.MOBILE,
            dimensions={"mobile": "flutter"},
            features={"realtime": True},
            overrides=ExplicitOverrides(exclude=("documentation",)),
        )
        assert ProjectDescription.from_dict(description.to_dict()) == description


class TestSelectionResult:
    """Tests for SelectionResult."""

    def test_membership_and_length(self):
        """Test container helpers."""
        selection = SelectionResult(active_profiles=("testing", "frontend"))
        assert "frontend" in selection
        assert "backend" not in selection
        assert len(selection) == 2

    def test_to_dict_order(self):
        """Test that to_dict follows active order and sorts suppressed ids."""
        selection = SelectionResult(
            active_profiles=("testing", "frontend"),
            reasons={"frontend": ("type:web",), "testing": ("core",)},
            suppressed={"mobile": "b", "backend": "a"},
        )
        data = selection.to_dict()
        assert list(data["reasons"]) == ["testing", "frontend"]
        assert list(data["suppressed"]) == ["backend", "mobile"]

    def test_mappings_are_read_only(self):
        """Test that reasons and suppressed cannot be changed after construction."""
        reasons = {"testing": ["core"]}
        selection = SelectionResult(active_profiles=("testing",), reasons=reasons, suppressed={"mobile": "x"})

        with pytest.raises(TypeError):
            selection.reasons["frontend"] = ("type:web",)
        with pytest.raises(TypeError):
            selection.suppressed["backend"] = "override:exclude"

        reasons["testing"].append("feature:auth")
        assert selection.reasons["testing"] == ("core",)

    def test_hashable(self):
        """Test that equal selections hash equal."""
        first = SelectionResult(("testing",), reasons={"testing": ("core",)})
        second = SelectionResult(("testing",), reasons={"testing": ("core",)})
        assert first == second
        assert len({first, second}) == 1
