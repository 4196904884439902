"""Task router.

Suggests which profiles to consult for a single task and in what order.

Routing:
1. Keyword triggers on registered profiles are matched against the task
   wording (whole words, case-insensitive)
2. Glob file patterns are matched against the files the task touches
3. Matches are ordered so that every profile follows the profiles it
   depends on; ties are broken by priority, then id
4. The ordered profiles are grouped into execution phases: a phase holds
   profiles whose dependencies were all covered by earlier phases

A named chain replaces steps 1-4 with a predefined phase list, restricted to
registered profiles.

Public API:
    route_task: Ordered profile ids for a task
    order_profiles: Dependency-respecting order of a set of ids
    execution_plan: Group ordered ids into phases
    plan_route: RoutePlan for a task, optionally from a named chain
"""

import logging
import re
from collections.abc import Iterable

from vibecode.exceptions import ConfigError, UnknownValueError
from vibecode.models.profile_models import TriggerKind
from vibecode.models.selection_models import ExecutionPhase, RoutePlan
from vibecode.profile_registry import ProfileRegistry
from vibecode.rule_tables import DEFAULT_RULES, RuleSet, find_dependency_cycle

logger = logging.getLogger(__name__)

GENERAL_PURPOSE = "general-purpose"
DEFAULT_PRIORITY = 99


def _keyword_regex(pattern: str) -> re.Pattern[str]:
    # Lookarounds instead of \b so keywords such as "c++" or ".net" still match
    return re.compile(rf"(?<!\w)(?:{pattern})(?!\w)", re.IGNORECASE)


def _glob_to_regex(pattern: str) -> re.Pattern[str]:
    parts = []
    idx = 0
    while idx < len(pattern):
        if pattern.startswith("**/", idx):
            parts.append("(?:.*/)?")
            idx += 3
        elif pattern.startswith("**", idx):
            parts.append(".*")
            idx += 2
        elif pattern[idx] == "*":
            parts.append("[^/]*")
            idx += 1
        elif pattern[idx] == "?":
            parts.append("[^/]")
            idx += 1
        else:
            parts.append(re.escape(pattern[idx]))
            idx += 1
    return re.compile("^" + "".join(parts) + "$")


def _normalize_path(path: str) -> str:
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


def order_profiles(profile_ids: Iterable[str], rules: RuleSet = DEFAULT_RULES) -> tuple[str, ...]:
    """Order profiles so dependencies come first, then by priority and id.

    Only dependencies present in ``profile_ids`` constrain the order.

    Raises:
        ConfigError: If the rule set's dependencies form a cycle
    """
    pending = set(profile_ids)
    ordered: list[str] = []

    def sort_key(pid: str) -> tuple[int, str]:
        return (rules.priorities.get(pid, DEFAULT_PRIORITY), pid)

    while pending:
        ready = [
            pid for pid in pending if not any(dep in pending for dep in rules.dependencies.get(pid, ()))
        ]
        if not ready:
            cycle = find_dependency_cycle(rules.dependencies) or sorted(pending)
            raise ConfigError(f"dependencies contain a cycle: {' -> '.join(cycle)}")
        chosen = min(ready, key=sort_key)
        ordered.append(chosen)
        pending.discard(chosen)

    return tuple(ordered)


def execution_plan(
    profile_ids: Iterable[str], rules: RuleSet = DEFAULT_RULES, parallel: bool = True
) -> tuple[ExecutionPhase, ...]:
    """Group profiles into phases that respect dependencies.

    Args:
        profile_ids: Profiles to schedule (any order)
        rules: Rule set supplying dependencies and priorities
        parallel: Allow multi-profile phases to run concurrently

    Returns:
        Phases in execution order; within a phase, profiles keep routing order

    Example:
        >>> execution_plan(["testing", "frontend", "backend"])
        (ExecutionPhase(profiles=('backend', 'frontend'), parallel=True),
         ExecutionPhase(profiles=('testing',), parallel=False))
    """
    ordered = order_profiles(profile_ids, rules)
    members = set(ordered)

    level: dict[str, int] = {}
    for pid in ordered:
        deps = [dep for dep in rules.dependencies.get(pid, ()) if dep in members]
        level[pid] = max((level[dep] + 1 for dep in deps), default=0)

    phases = []
    for depth in range(max(level.values(), default=-1) + 1):
        group = tuple(pid for pid in ordered if level[pid] == depth)
        phases.append(ExecutionPhase(group, parallel=parallel and len(group) > 1))
    return tuple(phases)


def route_task(
    task: str,
    registry: ProfileRegistry,
    files: Iterable[str] = (),
    rules: RuleSet = DEFAULT_RULES,
) -> tuple[str, ...]:
    """Suggest profiles for a task from its wording and touched files.

    Keyword triggers are matched as whole words (case-insensitive); file
    patterns use glob syntax where ``**`` spans directories. Only registered
    profiles are returned, dependencies before dependents, then by rule
    priority and id.

    Args:
        task: Free-text task description
        registry: Loaded profile catalog
        files: Relative paths the task touches
        rules: Rule tables supplying file patterns, priorities and dependencies

    Returns:
        Tuple of profile ids, or ("general-purpose",) if nothing matched
    """
    matched: set[str] = set()

    for descriptor in registry.descriptors():
        for trigger in descriptor.triggers:
            if trigger.kind is not TriggerKind.KEYWORD:
                continue
            if _keyword_regex(trigger.key).search(task):
                matched.add(descriptor.id)
                break

    paths = [_normalize_path(f) for f in files]
    for pattern, ids in rules.file_patterns.items():
        regex = _glob_to_regex(pattern)
        if any(regex.match(path) for path in paths):
            matched.update(pid for pid in ids if pid in registry)

    if not matched:
        logger.debug(f"No profile matched task: {task}")
        return (GENERAL_PURPOSE,)

    return order_profiles(matched, rules)


def plan_route(
    task: str,
    registry: ProfileRegistry,
    files: Iterable[str] = (),
    rules: RuleSet = DEFAULT_RULES,
    chain: str | None = None,
    parallel: bool = True,
) -> RoutePlan:
    """Route a task and build its execution phases.

    Args:
        task: Free-text task description
        registry: Loaded profile catalog
        files: Relative paths the task touches
        rules: Rule tables
        chain: Name of a predefined chain to use instead of routing
        parallel: Allow multi-profile phases to run concurrently

    Returns:
        RoutePlan

    Raises:
        UnknownValueError: If chain is not a known chain name
    """
    if chain is not None:
        return _chain_plan(chain, registry, rules, parallel)

    profiles = route_task(task, registry, files, rules)
    if profiles == (GENERAL_PURPOSE,):
        return RoutePlan(profiles, (ExecutionPhase(profiles),))
    return RoutePlan(profiles, execution_plan(profiles, rules, parallel))


def _chain_plan(chain: str, registry: ProfileRegistry, rules: RuleSet, parallel: bool) -> RoutePlan:
    if chain not in rules.chains:
        raise UnknownValueError("chain", chain, sorted(rules.chains))

    phases = []
    for phase in rules.chains[chain]:
        present = tuple(pid for pid in phase.profiles if pid in registry)
        if present:
            phases.append(
                ExecutionPhase(present, parallel=parallel and phase.parallel and len(present) > 1)
            )

    profiles: list[str] = []
    for phase in phases:
        profiles.extend(pid for pid in phase.profiles if pid not in profiles)

    if not phases:
        logger.debug(f"No profile of chain {chain} is registered")
        return RoutePlan((GENERAL_PURPOSE,), (ExecutionPhase((GENERAL_PURPOSE,)),), chain=chain)
    return RoutePlan(tuple(profiles), tuple(phases), chain=chain)


__all__ = [
    "GENERAL_PURPOSE",
    "execution_plan",
    "order_profiles",
    "plan_route",
    "route_task",
]
