"""Profile resolution engine.

Computes the unique, conflict-free set of active profiles for a project
description. Resolution is a deterministic table walk with no backtracking:

1. Core profiles
2. Type-derived profiles
3. Dimension-derived profiles (one per non-"none" dimension)
4. Feature-derived profiles (one per enabled feature)
5. Explicit includes, then explicit excludes
6. Mutex enforcement over rule-derived candidates
7. Tiered ordering and reasons

Mutex precedence (highest first): dimension, feature, type, core. Explicitly
included profiles never compete and are never dropped.

Public API:
    resolve: Resolve a ProjectDescription to a SelectionResult
"""

import logging
from enum import IntEnum

from vibecode.exceptions import ConfigConflictError, UnknownValueError
from vibecode.models.project_models import DIMENSIONS, NONE_VALUE, ProjectDescription
from vibecode.models.selection_models import SelectionResult
from vibecode.profile_registry import ProfileRegistry
from vibecode.rule_tables import DEFAULT_RULES, RuleSet

logger = logging.getLogger(__name__)

INCLUDE_REASON = "override:include"
EXCLUDE_REASON = "override:exclude"
CORE_REASON = "core"


class Tier(IntEnum):
    """Ordering tier of an activated profile (lower is listed first)."""

    CORE = 0
    TYPE = 1
    DIMENSION = 2
    FEATURE = 3
    OVERRIDE = 4


# Mutex precedence per tier (higher wins)
_PRECEDENCE = {
    Tier.CORE: 0,
    Tier.TYPE: 1,
    Tier.FEATURE: 2,
    Tier.DIMENSION: 3,
}


def _validate(description: ProjectDescription, registry: ProfileRegistry, rules: RuleSet) -> None:
    for dimension, value in description.dimensions.items():
        if dimension not in DIMENSIONS:
            raise UnknownValueError("dimensions", dimension, DIMENSIONS)
        if value != NONE_VALUE and value not in rules.dimension_profiles.get(dimension, {}):
            raise UnknownValueError(dimension, value, rules.allowed_values(dimension))

    for feature in description.features:
        if feature not in rules.feature_profiles:
            raise UnknownValueError("features", feature, rules.allowed_features())

    for profile_id in description.overrides.include:
        if profile_id not in registry:
            raise UnknownValueError("overrides", profile_id, sorted(registry.ids()))


def resolve(
    description: ProjectDescription,
    registry: ProfileRegistry,
    rules: RuleSet = DEFAULT_RULES,
) -> SelectionResult:
    """Resolve the active profile set for a project.

    Args:
        description: Project facts
        registry: Loaded profile catalog (supplies mutex groups and valid ids)
        rules: Rule tables to consult

    Returns:
        SelectionResult with tiered ordering and per-profile reasons

    Raises:
        UnknownValueError: If a dimension, value, feature or included id is
            outside its enumeration
        ConfigConflictError: If rule-derived candidates of equal precedence
            contend for one mutex group

    Example:
        >>> result = resolve(ProjectDescription(type=ProjectType.WEB), registry)
        >>> result.active_profiles
        ('documentation', 'security', 'testing', 'design', 'frontend')
    """
    _validate(description, registry, rules)

    candidates: dict[str, list[tuple[Tier, str]]] = {}

    def add(profile_id: str, tier: Tier, reason: str) -> None:
        entries = candidates.setdefault(profile_id, [])
        if (tier, reason) not in entries:
            entries.append((tier, reason))

    for profile_id in rules.core_profiles:
        add(profile_id, Tier.CORE, CORE_REASON)

    type_reason = f"type:{description.type.value}"
    for profile_id in rules.profiles_for_type(description.type):
        add(profile_id, Tier.TYPE, type_reason)

    for dimension, value in description.active_dimensions():
        add(rules.dimension_profiles[dimension][value], Tier.DIMENSION, f"{dimension}={value}")

    for feature in description.enabled_features():
        add(rules.feature_profiles[feature], Tier.FEATURE, f"feature:{feature}")

    included = set(description.overrides.include)
    for profile_id in description.overrides.include:
        add(profile_id, Tier.OVERRIDE, INCLUDE_REASON)

    suppressed: dict[str, str] = {}
    for profile_id in description.overrides.exclude:
        if candidates.pop(profile_id, None) is not None:
            suppressed[profile_id] = EXCLUDE_REASON
        included.discard(profile_id)

    _enforce_mutex_groups(candidates, included, registry, rules, suppressed)

    ordered = sorted(candidates, key=lambda pid: (min(t for t, _ in candidates[pid]), pid))
    reasons = {pid: tuple(reason for _, reason in candidates[pid]) for pid in ordered}

    logger.debug(f"Resolved {len(ordered)} profiles for {description.type.value} project")
    return SelectionResult(active_profiles=tuple(ordered), reasons=reasons, suppressed=suppressed)


def _enforce_mutex_groups(
    candidates: dict[str, list[tuple[Tier, str]]],
    included: set[str],
    registry: ProfileRegistry,
    rules: RuleSet,
    suppressed: dict[str, str],
) -> None:
    groups: dict[str, list[str]] = {}
    for profile_id in candidates:
        if profile_id in included:
            continue
        group = registry.group_of(profile_id, rules)
        if group is not None:
            groups.setdefault(group, []).append(profile_id)

    for group in sorted(groups):
        members = sorted(groups[group])
        if len(members) < 2:
            continue

        precedence = {
            pid: max(_PRECEDENCE[tier] for tier, _ in candidates[pid] if tier in _PRECEDENCE)
            for pid in members
        }
        top = max(precedence.values())
        winners = [pid for pid in members if precedence[pid] == top]
        if len(winners) > 1:
            raise ConfigConflictError(group, winners)

        winner = winners[0]
        for pid in members:
            if pid != winner:
                del candidates[pid]
                suppressed[pid] = f"mutex:{group} superseded by {winner}"
                logger.debug(f"Dropped {pid} from mutex group {group} in favour of {winner}")


__all__ = ["Tier", "resolve"]
