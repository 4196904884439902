"""
Selection Data Models

Outputs of the resolution engine, the task router and the content
synthesizer. Mapping fields are stored as read-only views so a result cannot
change after it is returned.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class SelectionResult:
    """Resolved set of active profiles.

    Attributes:
        active_profiles: Unique ids ordered core, type, dimension, feature,
            explicit include; alphabetical within each tier
        reasons: Profile id -> labels of the rules that activated it
        suppressed: Profile id -> why the profile was dropped
    """

    active_profiles: tuple[str, ...]
    reasons: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    suppressed: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "active_profiles", tuple(self.active_profiles))
        object.__setattr__(
            self, "reasons", MappingProxyType({k: tuple(v) for k, v in self.reasons.items()})
        )
        object.__setattr__(self, "suppressed", MappingProxyType(dict(self.suppressed)))

    def __hash__(self) -> int:
        return hash(
            (
                self.active_profiles,
                tuple(sorted(self.reasons.items())),
                tuple(sorted(self.suppressed.items())),
            )
        )

    def __contains__(self, profile_id: object) -> bool:
        return profile_id in self.active_profiles

    def __len__(self) -> int:
        return len(self.active_profiles)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary (key order is stable)."""
        return {
            "active_profiles": list(self.active_profiles),
            "reasons": {pid: list(self.reasons.get(pid, ())) for pid in self.active_profiles},
            "suppressed": {pid: self.suppressed[pid] for pid in sorted(self.suppressed)},
        }


@dataclass(frozen=True)
class ExecutionPhase:
    """Profiles consulted together in one step of a task.

    Attributes:
        profiles: Profile ids in this phase, in routing order
        parallel: Whether the profiles may be consulted concurrently
    """

    profiles: tuple[str, ...]
    parallel: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"profiles": list(self.profiles), "parallel": self.parallel}


@dataclass(frozen=True)
class RoutePlan:
    """Profiles suggested for a task and the order to consult them in.

    Attributes:
        profiles: Suggested ids, dependencies before dependents
        phases: Execution phases covering every suggested id
        chain: Name of the predefined chain used, or None for a plan
            derived from the task wording and files
    """

    profiles: tuple[str, ...]
    phases: tuple[ExecutionPhase, ...]
    chain: str | None = None

    @property
    def kind(self) -> str:
        return "dynamic" if self.chain is None else "chain"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "chain": self.chain,
            "profiles": list(self.profiles),
            "phases": [phase.to_dict() for phase in self.phases],
        }


@dataclass(frozen=True)
class Artifact:
    """Generated document paired with its suggested relative path."""

    name: str
    content: str


__all__ = ["Artifact", "ExecutionPhase", "RoutePlan", "SelectionResult"]
