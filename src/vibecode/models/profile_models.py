"""
Profile Data Models

Identity and matching metadata for a single agent profile.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class TriggerKind(str, Enum):
    """Kinds of conditions that make a profile a candidate."""

    TYPE = "type"
    DIMENSION = "dimension"
    FEATURE = "feature"
    KEYWORD = "keyword"


@dataclass(frozen=True)
class Trigger:
    """Declarative match condition.

    Examples:
        Trigger(TriggerKind.DIMENSION, "backend", "supabase")
        Trigger(TriggerKind.FEATURE, "payments", "true")
        Trigger(TriggerKind.KEYWORD, "stripe", "")
    """

    kind: TriggerKind
    key: str
    value: str = ""

    def label(self) -> str:
        if self.kind is TriggerKind.DIMENSION:
            return f"{self.key}={self.value}"
        return f"{self.kind.value}:{self.key}"


@dataclass(frozen=True)
class ProfileDescriptor:
    """Profile metadata.

    Attributes:
        id: Stable profile id (entry name minus the -agent.md suffix)
        display_name: Human label derived from id
        source_location: Path the profile was read from (never modified)
        mutex_group: Group tag; at most one member per group may be active
        triggers: Conditions that make this profile a candidate
    """

    id: str
    display_name: str
    source_location: Path
    mutex_group: str | None = None
    triggers: tuple[Trigger, ...] = field(default_factory=tuple)

    @property
    def keywords(self) -> tuple[str, ...]:
        return tuple(t.key for t in self.triggers if t.kind is TriggerKind.KEYWORD)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.display_name,
            "filename": self.source_location.name,
            "mutex_group": self.mutex_group,
            "triggers": [t.label() for t in self.triggers],
        }


__all__ = ["ProfileDescriptor", "Trigger", "TriggerKind"]
