"""Custom exceptions for vibecode.

All errors carry the structured detail a caller needs to build an actionable
message. None of them are retryable: they signal a broken catalog, a bad
project description or miswired callers.
"""

from collections.abc import Iterable


class VibecodeError(Exception):
    """Base exception for vibecode errors."""

    exit_code = 1


class RegistryError(VibecodeError):
    """Profile catalog could not be loaded."""

    UNREADABLE_SOURCE = "unreadable-source"
    DUPLICATE_ID = "duplicate-id"
    INVALID_FRONT_MATTER = "invalid-front-matter"

    def __init__(self, kind: str, detail: str):
        self.kind = kind
        self.detail = detail
        super().__init__(f"[{kind}] {detail}")


class UnknownValueError(VibecodeError):
    """Project description uses a value outside a closed enumeration."""

    def __init__(self, dimension: str, value: str, allowed: Iterable[str]):
        self.dimension = dimension
        self.value = value
        self.allowed = tuple(allowed)
        super().__init__(
            f"Unknown value '{value}' for {dimension}\n"
            f"Allowed values: {', '.join(self.allowed)}"
        )


class ConfigConflictError(VibecodeError):
    """Two rule-derived profiles contend for the same mutex group."""

    def __init__(self, group: str, candidates: Iterable[str]):
        self.group = group
        self.candidates = tuple(candidates)
        super().__init__(
            f"Conflicting profiles for mutex group '{group}': {', '.join(self.candidates)}\n"
            f"Pick one explicitly with an override or change the project description."
        )


class SynthesisError(VibecodeError):
    """Selection references a profile the registry does not know."""

    MISSING_PROFILE = "missing-profile"

    def __init__(self, kind: str, profile_id: str):
        self.kind = kind
        self.profile_id = profile_id
        super().__init__(f"[{kind}] Profile '{profile_id}' is not in the registry")


class ConfigError(VibecodeError):
    """Raised when configuration or rule files cannot be loaded."""

    pass


class ArtifactWriteError(VibecodeError):
    """Raised when generated artifacts cannot be persisted."""

    pass


__all__ = [
    "ArtifactWriteError",
    "ConfigConflictError",
    "ConfigError",
    "RegistryError",
    "SynthesisError",
    "UnknownValueError",
    "VibecodeError",
]
