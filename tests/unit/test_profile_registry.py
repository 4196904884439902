"""Unit tests for profile_registry module."""

import os

import pytest

from vibecode.exceptions import RegistryError
from vibecode.models.profile_models import Trigger, TriggerKind
from vibecode.profile_registry import (
    display_name_for,
    load_registry,
    profile_id_from_entry,
    split_front_matter,
)
from vibecode.rule_tables import DEFAULT_RULES


class TestProfileIdFromEntry:
    """Tests for entry name normalization."""

    def test_strips_suffix(self):
        """Test that the -agent.md suffix is removed."""
        assert profile_id_from_entry("frontend-agent.md") == "frontend"

    def test_lowercases_and_replaces_underscores(self):
        """Test case folding and underscore replacement."""
        assert profile_id_from_entry("Firebase_Backend-agent.md") == "firebase-backend"

    def test_suffix_with_underscore(self):
        """Test that an underscore before 'agent' still matches the suffix."""
        assert profile_id_from_entry("aws_backend_agent.md") == "aws-backend"

    def test_non_profile_entries(self):
        """Test that entries without the suffix are not profiles."""
        assert profile_id_from_entry("README.md") is None
        assert profile_id_from_entry("frontend.md") is None
        assert profile_id_from_entry("-agent.md") is None


class TestDisplayName:
    """Tests for display_name_for."""

    def test_title_cases_words(self):
        """Test hyphenated ids become title-cased words."""
        assert display_name_for("websocket-realtime") == "Websocket Realtime"
        assert display_name_for("frontend") == "Frontend"

    def test_aws_acronym(self):
        """Test that aws is rendered in upper case."""
        assert display_name_for("aws-backend") == "AWS Backend"

    def test_keeps_inner_case(self):
        """Test that only the first letter of each word changes."""
        assert display_name_for("api-graphql") == "Api Graphql"


class TestSplitFrontMatter:
    """Tests for split_front_matter."""

    def test_no_front_matter(self):
        """Test text without a front matter block is returned unchanged."""
        text = "# Title\n\nBody\n"
        assert split_front_matter(text) == ({}, text)

    def test_front_matter_parsed(self):
        """Test that the block is parsed and removed from the body."""
        meta, body = split_front_matter("---\nmutex_group: styling\n---\n# Title\n")
        assert meta == {"mutex_group": "styling"}
        assert body == "# Title\n"

    def test_empty_block(self):
        """Test an empty block yields an empty mapping."""
        meta, body = split_front_matter("---\n---\nBody\n")
        assert meta == {}
        assert body == "Body\n"

    def test_unterminated_block(self):
        """Test that an unterminated block is rejected."""
        with pytest.raises(ValueError, match="not terminated"):
            split_front_matter("---\nmutex_group: styling\n# Title\n")

    def test_non_mapping_block(self):
        """Test that a list block is rejected."""
        with pytest.raises(ValueError, match="mapping"):
            split_front_matter("---\n- a\n- b\n---\nBody\n")


class TestLoadRegistry:
    """Tests for load_registry."""

    def test_loads_every_profile(self, agents_dir):
        """Test that every *-agent.md file becomes a profile."""
        registry = load_registry(agents_dir)
        assert set(registry.ids()) == DEFAULT_RULES.referenced_profiles()

    def test_skips_non_profile_entries(self, registry):
        """Test that README.md is not registered."""
        assert "readme" not in registry
        assert all(not pid.endswith(".md") for pid in registry)

    def test_sorted_order(self, registry):
        """Test that profiles are ordered by entry name."""
        assert list(registry.ids()) == sorted(registry.ids())

    def test_descriptor_fields(self, registry, agents_dir):
        """Test display name, source location and group of a descriptor."""
        descriptor = registry["aws-backend"]
        assert descriptor.display_name == "AWS Backend"
        assert descriptor.source_location == agents_dir / "aws-backend-agent.md"
        assert descriptor.mutex_group == "backend-provider"

    def test_profile_without_group(self, registry):
        """Test that profiles outside the default groups have no group."""
        assert registry["testing"].mutex_group is None

    def test_dimension_triggers(self, registry):
        """Test that dimension rules become triggers on their profile."""
        triggers = registry["aws-backend"].triggers
        assert Trigger(TriggerKind.DIMENSION, "backend", "aws") in triggers

    def test_type_and_feature_triggers(self, registry):
        """Test type and feature triggers."""
        assert Trigger(TriggerKind.TYPE, "web") in registry["design"].triggers
        assert Trigger(TriggerKind.FEATURE, "payments", "true") in registry["payment"].triggers

    def test_keyword_triggers(self, registry):
        """Test that routing keywords are attached to profiles."""
        assert "payment|stripe|billing" in registry["payment"].keywords

    def test_mixed_case_entry(self, make_catalog):
        """Test that mixed-case entries normalize to lowercase ids."""
        directory = make_catalog({})
        (directory / "Firebase_Backend-agent.md").write_text("# Firebase\n\nBody\n")
        registry = load_registry(directory)
        assert registry.ids() == ("firebase-backend",)
        assert registry["firebase-backend"].display_name == "Firebase Backend"

    def test_duplicate_ids(self, make_catalog):
        """Test that two entries normalizing to one id fail loudly."""
        directory = make_catalog({"firebase-backend": None})
        (directory / "firebase_backend-agent.md").write_text("# Firebase\n")

        with pytest.raises(RegistryError) as exc_info:
            load_registry(directory)

        assert exc_info.value.kind == RegistryError.DUPLICATE_ID
        assert "firebase-backend" in str(exc_info.value)

    def test_missing_directory(self, tmp_path):
        """Test that a missing source directory is unreadable."""
        with pytest.raises(RegistryError) as exc_info:
            load_registry(tmp_path / "missing")
        assert exc_info.value.kind == RegistryError.UNREADABLE_SOURCE

    def test_unreadable_entry(self, make_catalog):
        """Test that an entry that cannot be read is reported."""
        directory = make_catalog({"frontend": None})
        (directory / "broken-agent.md").mkdir()

        with pytest.raises(RegistryError) as exc_info:
            load_registry(directory)

        assert exc_info.value.kind == RegistryError.UNREADABLE_SOURCE
        assert "broken-agent.md" in exc_info.value.detail

    def test_first_unreadable_entry_wins(self, make_catalog):
        """Test that the lexically first failing entry is reported."""
        directory = make_catalog({})
        (directory / "zeta-agent.md").mkdir()
        (directory / "alpha-agent.md").write_bytes(b"\xff\xfe\x00bad")

        with pytest.raises(RegistryError) as exc_info:
            load_registry(directory, max_workers=8)

        assert "alpha-agent.md" in exc_info.value.detail

    def test_invalid_utf8(self, make_catalog):
        """Test that undecodable entries are unreadable."""
        directory = make_catalog({})
        (directory / "frontend-agent.md").write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(RegistryError) as exc_info:
            load_registry(directory)
        assert exc_info.value.kind == RegistryError.UNREADABLE_SOURCE

    def test_invalid_max_workers(self, agents_dir):
        """Test that max_workers must be positive."""
        with pytest.raises(ValueError, match="max_workers"):
            load_registry(agents_dir, max_workers=0)

    def test_text_excludes_front_matter(self, make_catalog):
        """Test that text_for returns the body only."""
        directory = make_catalog({"frontend": "---\nkeywords: [tailwind]\n---\n# Frontend\n\nBody\n"})
        registry = load_registry(directory)
        assert registry.text_for("frontend") == "# Frontend\n\nBody\n"


class TestFrontMatterMetadata:
    """Tests for mutex_group and keywords declared in front matter."""

    def test_front_matter_group_overrides_default(self, make_catalog):
        """Test that a declared group replaces the rule-table group."""
        directory = make_catalog({"frontend": "---\nmutex_group: ui-framework\n---\n# Frontend\n"})
        registry = load_registry(directory)
        assert registry["frontend"].mutex_group == "ui-framework"

    def test_null_group_removes_default(self, make_catalog):
        """Test that an explicit null group opts out of the default group."""
        directory = make_catalog({"flutter": "---\nmutex_group: null\n---\n# Flutter\n"})
        registry = load_registry(directory)
        assert registry["flutter"].mutex_group is None

    def test_front_matter_keywords_are_literal(self, make_catalog):
        """Test that declared keywords are stored escaped and lowercased."""
        directory = make_catalog({"frontend": "---\nkeywords: [Tailwind, C++]\n---\n# Frontend\n"})
        keywords = load_registry(directory)["frontend"].keywords
        assert "tailwind" in keywords
        assert r"c\+\+" in keywords

    def test_invalid_group_type(self, make_catalog):
        """Test that a non-string group is rejected."""
        directory = make_catalog({"frontend": "---\nmutex_group: [a, b]\n---\n# Frontend\n"})
        with pytest.raises(RegistryError) as exc_info:
            load_registry(directory)
        assert exc_info.value.kind == RegistryError.INVALID_FRONT_MATTER

    def test_invalid_keywords_type(self, make_catalog):
        """Test that keywords must be a list of strings."""
        directory = make_catalog({"frontend": "---\nkeywords: tailwind\n---\n# Frontend\n"})
        with pytest.raises(RegistryError) as exc_info:
            load_registry(directory)
        assert exc_info.value.kind == RegistryError.INVALID_FRONT_MATTER

    def test_malformed_yaml(self, make_catalog):
        """Test that broken YAML in front matter is rejected."""
        directory = make_catalog({"frontend": "---\nkeywords: [unclosed\n---\n# Frontend\n"})
        with pytest.raises(RegistryError) as exc_info:
            load_registry(directory)
        assert exc_info.value.kind == RegistryError.INVALID_FRONT_MATTER


class TestRegistryDeterminism:
    """Tests that enumeration and read order never change the result."""

    def test_shuffled_listing(self, agents_dir, monkeypatch):
        """Test that a reversed directory listing yields the same registry."""
        expected = load_registry(agents_dir)
        real_listdir = os.listdir

        monkeypatch.setattr(
            "vibecode.profile_registry.os.listdir", lambda path: list(reversed(real_listdir(path)))
        )
        shuffled = load_registry(agents_dir)

        assert shuffled.ids() == expected.ids()
        assert shuffled.descriptors() == expected.descriptors()

    def test_worker_count_does_not_matter(self, agents_dir):
        """Test sequential and concurrent reads agree."""
        sequential = load_registry(agents_dir, max_workers=1)
        concurrent = load_registry(agents_dir, max_workers=16)

        assert sequential.ids() == concurrent.ids()
        for pid in sequential:
            assert sequential.text_for(pid) == concurrent.text_for(pid)

    def test_registry_is_read_only(self, registry):
        """Test that the registry cannot be mutated."""
        with pytest.raises(TypeError):
            registry["new"] = registry["frontend"]  # type: ignore[index]
