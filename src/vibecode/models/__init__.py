"""
Vibecode Data Models

Shared dataclasses and enumerations used by the registry, the resolution
engine and the content synthesizer.

Philosophy:
- Zero dependencies on other vibecode modules (exceptions excepted)
- Immutable values: every model is a frozen dataclass
- Shared types used across multiple modules
"""

from .profile_models import ProfileDescriptor, Trigger, TriggerKind
from .project_models import DIMENSIONS, ExplicitOverrides, ProjectDescription, ProjectType
from .selection_models import Artifact, ExecutionPhase, RoutePlan, SelectionResult

__all__ = [
    "DIMENSIONS",
    "Artifact",
    "ExecutionPhase",
    "ExplicitOverrides",
    "ProfileDescriptor",
    "ProjectDescription",
    "ProjectType",
    "RoutePlan",
    "SelectionResult",
    "Trigger",
    "TriggerKind",
]
