"""
Project Data Models

Closed, tagged description of the project being configured. Free-form maps
from a project file are converted here so that unknown keys fail loudly
instead of being ignored.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from vibecode.exceptions import ConfigError, UnknownValueError

# Dimension names in reporting order
DIMENSIONS: tuple[str, ...] = ("frontend", "backend", "mobile", "database", "deployment")

NONE_VALUE = "none"


class ProjectType(str, Enum):
    """Overall project type."""

    WEB = "web"
    MOBILE = "mobile"
    FULLSTACK = "fullstack"
    API = "api"
    DESKTOP = "desktop"
    CLI = "cli"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "ProjectType":
        """Parse a project type name.

        Raises:
            UnknownValueError: If value is not a known project type
        """
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnknownValueError("type", str(value), [t.value for t in cls]) from None


@dataclass(frozen=True)
class ExplicitOverrides:
    """Caller-forced profile ids, applied after rule resolution."""

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.include or self.exclude)


@dataclass(frozen=True)
class ProjectDescription:
    """Facts about the project under configuration.

    Dimension values are validated against the rule tables at resolution
    time, since the enumerations live there.

    Attributes:
        type: Project type
        dimensions: Dimension name -> value (or "none")
        features: Feature name -> enabled
        overrides: Explicit include/exclude profile ids
    """

    type: ProjectType
    dimensions: Mapping[str, str] = field(default_factory=dict)
    features: Mapping[str, bool] = field(default_factory=dict)
    overrides: ExplicitOverrides = field(default_factory=ExplicitOverrides)

    def __post_init__(self) -> None:
        object.__setattr__(self, "dimensions", MappingProxyType(dict(self.dimensions)))
        object.__setattr__(self, "features", MappingProxyType(dict(self.features)))

    def __hash__(self) -> int:
        return hash(
            (
                self.type,
                frozenset(self.dimensions.items()),
                frozenset(self.features.items()),
                self.overrides,
            )
        )

    def active_dimensions(self) -> list[tuple[str, str]]:
        """Dimension entries whose value is not "none", in input order."""
        return [(k, v) for k, v in self.dimensions.items() if v != NONE_VALUE]

    def enabled_features(self) -> list[str]:
        """Sorted names of features set to true."""
        return sorted(name for name, enabled in self.features.items() if enabled)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type.value,
            "dimensions": dict(self.dimensions),
            "features": dict(self.features),
        }
        if self.overrides:
            data["overrides"] = {
                "include": list(self.overrides.include),
                "exclude": list(self.overrides.exclude),
            }
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectDescription":
        """Create a description from a parsed project file.

        Args:
            data: Dictionary with type, dimensions, features and overrides

        Returns:
            ProjectDescription instance

        Raises:
            ConfigError: If the structure is malformed
            UnknownValueError: If type is not a known project type
        """
        if not isinstance(data, dict):
            raise ConfigError("Project description must be a mapping")

        if "type" not in data:
            raise ConfigError("Missing required field: type")

        unknown_keys = sorted(set(data) - {"type", "dimensions", "features", "overrides"})
        if unknown_keys:
            raise ConfigError(f"Unknown project description fields: {', '.join(unknown_keys)}")

        dimensions = data.get("dimensions") or {}
        features = data.get("features") or {}
        overrides = data.get("overrides") or {}

        if not isinstance(dimensions, dict):
            raise ConfigError("dimensions must be a mapping of dimension name to value")
        if not isinstance(features, dict):
            raise ConfigError("features must be a mapping of feature name to true/false")
        if not isinstance(overrides, dict):
            raise ConfigError("overrides must be a mapping with include/exclude lists")

        for name, enabled in features.items():
            if not isinstance(enabled, bool):
                raise ConfigError(f"Feature '{name}' must be true or false, got {enabled!r}")

        return cls(
            type=ProjectType.parse(data["type"]),
            dimensions={
                str(k): NONE_VALUE if v is None else str(v).strip().lower()
                for k, v in dimensions.items()
            },
            features={str(k): v for k, v in features.items()},
            overrides=ExplicitOverrides(
                include=_id_list(overrides, "include"),
                exclude=_id_list(overrides, "exclude"),
            ),
        )


def _id_list(overrides: dict[str, Any], key: str) -> tuple[str, ...]:
    values = overrides.get(key) or []
    if isinstance(values, str) or not isinstance(values, list):
        raise ConfigError(f"overrides.{key} must be a list of profile ids")
    return tuple(str(v) for v in values)


__all__ = ["DIMENSIONS", "NONE_VALUE", "ExplicitOverrides", "ProjectDescription", "ProjectType"]
