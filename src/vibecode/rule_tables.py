"""Rule tables for profile resolution.

This module holds the fixed mappings the resolution engine consults:
project type -> profiles, (dimension, value) -> profile, feature -> profile,
mutex groups, and the keyword, file-pattern, priority, dependency and chain
tables used for task routing.

Philosophy:
- Ruthless simplicity: Dict-based O(1) lookup
- Self-contained and regeneratable: All default mappings defined here
- Closed enumerations: a dimension's allowed values are its table keys

Public API:
    RuleSet: Immutable bundle of rule tables
    DEFAULT_RULES: Built-in rule set
    load_rules: Load a rule set from a YAML file, overriding default sections
"""

import logging
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

try:
    import yaml
except ImportError:
    raise ImportError("PyYAML not available. Install with: pip install pyyaml")

from vibecode.exceptions import ConfigError
from vibecode.models.project_models import DIMENSIONS, NONE_VALUE, ProjectType
from vibecode.models.selection_models import ExecutionPhase

logger = logging.getLogger(__name__)

# Always active unless explicitly excluded
_CORE_PROFILES = ("documentation", "security", "testing")

_WEB_PROFILES = ("design", "frontend")
_API_PROFILES = ("api-graphql", "backend")

_TYPE_PROFILES: dict[str, tuple[str, ...]] = {
    "web": _WEB_PROFILES,
    "api": _API_PROFILES,
    "fullstack": tuple(sorted(set(_WEB_PROFILES) | set(_API_PROFILES))),
    "mobile": ("backend", "design", "mobile"),
    "desktop": _WEB_PROFILES,
    "cli": (),
    "other": (),
}

# (dimension, value) -> single profile id
_DIMENSION_PROFILES: dict[str, dict[str, str]] = {
    "frontend": {
        "react": "frontend",
        "nextjs": "frontend",
        "vue": "frontend",
        "nuxt": "frontend",
        "angular": "frontend",
        "svelte": "frontend",
        "sveltekit": "frontend",
    },
    "backend": {
        # Supabase is served by the general backend specialist
        "supabase": "backend",
        "firebase": "firebase-backend",
        "aws": "aws-backend",
        "node-api": "backend",
        "nestjs": "backend",
        "python": "backend",
        "go": "backend",
        "graphql": "api-graphql",
    },
    "mobile": {
        "react-native": "mobile",
        "expo": "mobile",
        "android-native": "mobile",
        "flutter": "flutter",
        "ios-native": "ios-swift",
    },
    "database": {
        "postgresql": "data",
        "mysql": "data",
        "mongodb": "data",
        "sqlite": "data",
        "sql": "data",
        "prisma": "database-migration",
    },
    "deployment": {
        "vercel": "devops",
        "netlify": "devops",
        "github-actions": "devops",
        "docker": "docker-container",
        "kubernetes": "docker-container",
    },
}

_FEATURE_PROFILES: dict[str, str] = {
    "authentication": "security",
    "payments": "payment",
    "realtime": "websocket-realtime",
    "email": "email-communication",
    "i18n": "localization",
    "pwa": "pwa-offline",
    "analytics": "seo-marketing",
    "seo": "seo-marketing",
    "accessibility": "accessibility",
    "ai": "ai-ml-integration",
    "monitoring": "monitoring-observability",
}

_MUTEX_GROUPS: dict[str, tuple[str, ...]] = {
    "backend-provider": ("aws-backend", "backend", "firebase-backend"),
    "mobile-platform": ("flutter", "ios-swift", "mobile"),
}

# Task keyword pattern (regex alternation) -> profile ids
_KEYWORDS: dict[str, tuple[str, ...]] = {
    "authentication|login|signup|auth": ("security", "backend", "frontend"),
    "database|query|migration|schema": ("data", "database-migration", "backend"),
    "ui|interface|component|design|layout": ("frontend", "design"),
    "test|testing|coverage|e2e": ("testing",),
    "deploy|deployment|ci|cd|pipeline": ("devops",),
    "performance|optimize|speed|cache": ("data", "monitoring-observability"),
    "api|endpoint|rest|graphql": ("api-graphql", "backend"),
    "mobile|ios|android|react native": ("mobile",),
    "security|encryption|vulnerability": ("security",),
    "docker|container|kubernetes": ("docker-container", "devops"),
    "accessibility|a11y|wcag": ("accessibility", "frontend"),
    "payment|stripe|billing": ("payment", "security", "backend"),
    "email|notification|sms": ("email-communication", "backend"),
    "websocket|realtime|socket": ("websocket-realtime", "backend"),
    "seo|marketing|analytics": ("seo-marketing", "frontend"),
    "i18n|localization|translation": ("localization", "frontend"),
}

# Glob-style file pattern -> profile ids
_FILE_PATTERNS: dict[str, tuple[str, ...]] = {
    "**/*.tsx": ("frontend", "design"),
    "**/*.jsx": ("frontend", "design"),
    "**/components/**": ("frontend", "testing"),
    "**/api/**": ("backend", "api-graphql"),
    "**/*.sql": ("data", "database-migration"),
    "**/supabase/**": ("backend", "security"),
    "**/*.test.*": ("testing",),
    "**/*.spec.*": ("testing",),
    ".github/workflows/**": ("devops",),
    "Dockerfile*": ("docker-container", "devops"),
    "**/auth/**": ("security", "backend"),
    "**/*.swift": ("ios-swift",),
    "**/*.dart": ("flutter",),
    "**/android/**": ("mobile",),
    "**/ios/**": ("mobile", "ios-swift"),
}

# Lower runs earlier when routing a task; unlisted profiles sort last
_PRIORITIES: dict[str, int] = {
    "backend": 1,
    "data": 1,
    "design": 1,
    "security": 1,
    "frontend": 2,
    "mobile": 2,
    "devops": 3,
    "testing": 3,
}

# Profiles consulted before another profile in the same task
_DEPENDENCIES: dict[str, tuple[str, ...]] = {
    "mobile": ("backend",),
    "testing": ("frontend", "backend"),
    "devops": ("backend",),
}

# Predefined multi-phase chains, selectable by name when routing a task
_CHAINS: dict[str, tuple[ExecutionPhase, ...]] = {
    "feature-development": (
        ExecutionPhase(("backend",)),
        ExecutionPhase(("frontend", "mobile"), parallel=True),
        ExecutionPhase(("testing",)),
    ),
    "bug-fix": (
        ExecutionPhase(("testing",)),
        ExecutionPhase(("backend", "frontend"), parallel=True),
        ExecutionPhase(("testing",)),
    ),
    "security-audit": (
        ExecutionPhase(("security",)),
        ExecutionPhase(("backend", "frontend"), parallel=True),
        ExecutionPhase(("testing",)),
    ),
    "performance-optimization": (
        ExecutionPhase(("monitoring-observability",)),
        ExecutionPhase(("data", "backend", "frontend"), parallel=True),
        ExecutionPhase(("testing",)),
    ),
}

_SECTIONS = (
    "core_profiles",
    "type_profiles",
    "dimension_profiles",
    "feature_profiles",
    "mutex_groups",
    "keywords",
    "file_patterns",
    "priorities",
    "dependencies",
    "chains",
)


@dataclass(frozen=True)
class RuleSet:
    """Immutable bundle of resolution and routing tables."""

    core_profiles: tuple[str, ...] = _CORE_PROFILES
    type_profiles: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(_TYPE_PROFILES))
    dimension_profiles: dict[str, dict[str, str]] = field(
        default_factory=lambda: {k: dict(v) for k, v in _DIMENSION_PROFILES.items()}
    )
    feature_profiles: dict[str, str] = field(default_factory=lambda: dict(_FEATURE_PROFILES))
    mutex_groups: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(_MUTEX_GROUPS))
    keywords: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(_KEYWORDS))
    file_patterns: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(_FILE_PATTERNS))
    priorities: dict[str, int] = field(default_factory=lambda: dict(_PRIORITIES))
    dependencies: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(_DEPENDENCIES))
    chains: dict[str, tuple[ExecutionPhase, ...]] = field(default_factory=lambda: dict(_CHAINS))

    def profiles_for_type(self, project_type: ProjectType) -> tuple[str, ...]:
        return self.type_profiles.get(project_type.value, ())

    def allowed_values(self, dimension: str) -> tuple[str, ...]:
        """Closed enumeration for a dimension, "none" included."""
        return (*sorted(self.dimension_profiles.get(dimension, {})), NONE_VALUE)

    def allowed_features(self) -> tuple[str, ...]:
        return tuple(sorted(self.feature_profiles))

    def default_group_of(self, profile_id: str) -> str | None:
        for group, members in self.mutex_groups.items():
            if profile_id in members:
                return group
        return None

    def with_core_profiles(self, core_profiles: list[str] | tuple[str, ...]) -> "RuleSet":
        return replace(self, core_profiles=tuple(core_profiles))

    def referenced_profiles(self) -> set[str]:
        """Every profile id any table can activate."""
        ids = set(self.core_profiles)
        for members in self.type_profiles.values():
            ids.update(members)
        for values in self.dimension_profiles.values():
            ids.update(values.values())
        ids.update(self.feature_profiles.values())
        return ids


DEFAULT_RULES = RuleSet()


def load_rules(path: Path, base: RuleSet = DEFAULT_RULES) -> RuleSet:
    """Load rule tables from a YAML file.

    Each top-level section present in the file replaces the corresponding
    section of ``base``; absent sections keep their defaults.

    Args:
        path: Path to YAML rules file
        base: Rule set supplying sections the file omits

    Returns:
        RuleSet instance

    Raises:
        ConfigError: If the file is missing, not valid YAML, or malformed
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise ConfigError(f"Rules file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in rules file {path}: {e}") from e

    if data is None:
        logger.debug(f"Rules file {path} is empty, using base rules")
        return base
    if not isinstance(data, dict):
        raise ConfigError(f"Rules file {path} must contain a mapping")

    unknown = sorted(set(data) - set(_SECTIONS))
    if unknown:
        raise ConfigError(f"Unknown rules sections in {path}: {', '.join(unknown)}")

    overrides: dict[str, Any] = {}
    try:
        if "core_profiles" in data:
            overrides["core_profiles"] = _id_tuple(data["core_profiles"], "core_profiles")
        if "type_profiles" in data:
            overrides["type_profiles"] = _parse_type_profiles(data["type_profiles"])
        if "dimension_profiles" in data:
            overrides["dimension_profiles"] = _parse_dimension_profiles(data["dimension_profiles"])
        if "feature_profiles" in data:
            overrides["feature_profiles"] = _str_mapping(data["feature_profiles"], "feature_profiles")
        if "mutex_groups" in data:
            overrides["mutex_groups"] = _parse_mutex_groups(data["mutex_groups"])
        if "keywords" in data:
            overrides["keywords"] = _parse_keywords(data["keywords"])
        if "file_patterns" in data:
            overrides["file_patterns"] = _list_mapping(data["file_patterns"], "file_patterns")
        if "priorities" in data:
            overrides["priorities"] = _parse_priorities(data["priorities"])
        if "dependencies" in data:
            overrides["dependencies"] = _parse_dependencies(data["dependencies"])
        if "chains" in data:
            overrides["chains"] = _parse_chains(data["chains"])
    except ConfigError as e:
        raise ConfigError(f"Invalid rules file {path}: {e}") from e

    logger.debug(f"Loaded rules from {path}: {', '.join(sorted(overrides)) or 'no sections'}")
    return replace(base, **overrides)


def _id_tuple(value: Any, section: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{section} must be a list of profile ids")
    return tuple(value)


def _str_mapping(value: Any, section: str) -> dict[str, str]:
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise ConfigError(f"{section} must map names to a single profile id")
    return dict(value)


def _list_mapping(value: Any, section: str) -> dict[str, tuple[str, ...]]:
    if not isinstance(value, dict):
        raise ConfigError(f"{section} must be a mapping")
    return {str(k): _id_tuple(v, f"{section}.{k}") for k, v in value.items()}


def _parse_type_profiles(value: Any) -> dict[str, tuple[str, ...]]:
    mapping = _list_mapping(value, "type_profiles")
    known = {t.value for t in ProjectType}
    unknown = sorted(set(mapping) - known)
    if unknown:
        raise ConfigError(
            f"type_profiles has unknown project types: {', '.join(unknown)} "
            f"(allowed: {', '.join(t.value for t in ProjectType)})"
        )
    return mapping


def _parse_dimension_profiles(value: Any) -> dict[str, dict[str, str]]:
    if not isinstance(value, dict):
        raise ConfigError("dimension_profiles must be a mapping")
    unknown = sorted(set(value) - set(DIMENSIONS))
    if unknown:
        raise ConfigError(
            f"dimension_profiles has unknown dimensions: {', '.join(unknown)} "
            f"(allowed: {', '.join(DIMENSIONS)})"
        )
    parsed = {}
    for dimension, table in value.items():
        table = _str_mapping(table, f"dimension_profiles.{dimension}")
        if NONE_VALUE in table:
            raise ConfigError(f"dimension_profiles.{dimension} cannot map '{NONE_VALUE}'")
        parsed[dimension] = table
    return parsed


def _parse_mutex_groups(value: Any) -> dict[str, tuple[str, ...]]:
    groups = _list_mapping(value, "mutex_groups")
    seen: dict[str, str] = {}
    for group, members in groups.items():
        for member in members:
            if member in seen:
                raise ConfigError(
                    f"Profile '{member}' is in both mutex groups '{seen[member]}' and '{group}'"
                )
            seen[member] = group
    return groups


def _parse_priorities(value: Any) -> dict[str, int]:
    if not isinstance(value, dict) or not all(
        isinstance(v, int) and not isinstance(v, bool) for v in value.values()
    ):
        raise ConfigError("priorities must map profile ids to integers")
    return {str(k): v for k, v in value.items()}


def _parse_keywords(value: Any) -> dict[str, tuple[str, ...]]:
    keywords = _list_mapping(value, "keywords")
    for pattern in keywords:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ConfigError(f"keywords pattern '{pattern}' is not a valid regular expression: {e}") from e
    return keywords


def _parse_dependencies(value: Any) -> dict[str, tuple[str, ...]]:
    dependencies = _list_mapping(value, "dependencies")
    cycle = find_dependency_cycle(dependencies)
    if cycle:
        raise ConfigError(f"dependencies contain a cycle: {' -> '.join(cycle)}")
    return dependencies


def _parse_chains(value: Any) -> dict[str, tuple[ExecutionPhase, ...]]:
    """Parse ``{name: [{profiles: [...], parallel: bool}, ...]}``."""
    if not isinstance(value, dict):
        raise ConfigError("chains must be a mapping")

    chains = {}
    for name, phases in value.items():
        if not isinstance(phases, list) or not phases:
            raise ConfigError(f"chains.{name} must be a non-empty list of phases")
        parsed = []
        for idx, phase in enumerate(phases, 1):
            if not isinstance(phase, dict) or set(phase) - {"profiles", "parallel"}:
                raise ConfigError(f"chains.{name} phase {idx} must have only profiles and parallel")
            profiles = _id_tuple(phase.get("profiles"), f"chains.{name} phase {idx} profiles")
            parallel = phase.get("parallel", False)
            if not isinstance(parallel, bool):
                raise ConfigError(f"chains.{name} phase {idx} parallel must be true or false")
            parsed.append(ExecutionPhase(profiles, parallel=parallel))
        chains[str(name)] = tuple(parsed)
    return chains


def find_dependency_cycle(dependencies: dict[str, tuple[str, ...]]) -> list[str] | None:
    """Return one dependency cycle as a list of ids, or None if acyclic.

    Example:
        >>> find_dependency_cycle({"a": ("b",), "b": ("a",)})
        ['a', 'b', 'a']
    """
    done: set[str] = set()

    def visit(node: str, path: list[str]) -> list[str] | None:
        if node in path:
            return path[path.index(node) :] + [node]
        if node in done:
            return None
        for dep in dependencies.get(node, ()):
            cycle = visit(dep, path + [node])
            if cycle:
                return cycle
        done.add(node)
        return None

    for node in sorted(dependencies):
        cycle = visit(node, [])
        if cycle:
            return cycle
    return None


__all__ = ["DEFAULT_RULES", "RuleSet", "find_dependency_cycle", "load_rules"]
