"""Profile registry for agent profiles.

This module loads the catalog of agent profiles from a directory of
``*-agent.md`` files and indexes them by id.

Profile File Format:
- Free-form Markdown, usually opening with a heading
- Optional YAML front matter block delimited by ``---`` lines
- Recognized front matter keys: ``mutex_group`` (string) and
  ``keywords`` (list of strings); other keys are ignored

Ordering:
- Entries are processed in lexicographic order of their raw names
- Reads may run in a thread pool; results are merged back in that order,
  so read completion order never changes ids, ordering, or which error wins

Philosophy:
- Read once, never mutate sources
- Fail fast on duplicate ids (never silently pick one)
"""

import logging
import os
import re
from collections.abc import Iterator, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from types import MappingProxyType
from typing import Any

try:
    import yaml
except ImportError:
    raise ImportError("PyYAML not available. Install with: pip install pyyaml")

from vibecode.exceptions import RegistryError
from vibecode.models.profile_models import ProfileDescriptor, Trigger, TriggerKind
from vibecode.models.project_models import DIMENSIONS, ProjectType
from vibecode.rule_tables import DEFAULT_RULES, RuleSet

logger = logging.getLogger(__name__)

AGENT_SUFFIX = "-agent.md"
FRONT_MATTER_DELIMITER = "---"

# Tokens rendered in upper case in display names
_ACRONYMS = {"aws": "AWS"}


def profile_id_from_entry(entry_name: str) -> str | None:
    """Derive a profile id from a catalog entry name.

    Args:
        entry_name: Raw file name (e.g. "Firebase_Backend-agent.md")

    Returns:
        Normalized id (e.g. "firebase-backend"), or None if the entry is not
        a profile
    """
    normalized = entry_name.strip().lower().replace("_", "-")
    if not normalized.endswith(AGENT_SUFFIX):
        return None
    profile_id = normalized[: -len(AGENT_SUFFIX)]
    return profile_id or None


def display_name_for(profile_id: str) -> str:
    """Human label for a profile id.

    Examples:
        >>> display_name_for("aws-backend")
        'AWS Backend'
        >>> display_name_for("websocket-realtime")
        'Websocket Realtime'
    """
    words = []
    for token in profile_id.split("-"):
        words.append(_ACRONYMS.get(token, token[:1].upper() + token[1:]))
    return " ".join(words)


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Separate an optional YAML front matter block from the body.

    Args:
        text: Raw profile text

    Returns:
        Tuple of (front matter mapping, body text)

    Raises:
        ValueError: If the block is unterminated or not a YAML mapping
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}, text

    for idx in range(1, len(lines)):
        if lines[idx].strip() == FRONT_MATTER_DELIMITER:
            block = "".join(lines[1:idx])
            body = "".join(lines[idx + 1 :])
            break
    else:
        raise ValueError("front matter block is not terminated")

    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise ValueError(f"front matter is not valid YAML: {e}") from e

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        raise ValueError("front matter must be a YAML mapping")
    return data, body


class ProfileRegistry(Mapping[str, ProfileDescriptor]):
    """Immutable, duplicate-free map from profile id to descriptor.

    Iteration follows catalog order (sorted raw entry names).
    """

    def __init__(
        self,
        descriptors: list[ProfileDescriptor],
        texts: dict[str, str],
        source_dir: Path | None = None,
    ):
        self._descriptors = MappingProxyType({d.id: d for d in descriptors})
        self._texts = MappingProxyType(dict(texts))
        self.source_dir = source_dir

    def __getitem__(self, profile_id: str) -> ProfileDescriptor:
        return self._descriptors[profile_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)

    def ids(self) -> tuple[str, ...]:
        return tuple(self._descriptors)

    def descriptors(self) -> tuple[ProfileDescriptor, ...]:
        return tuple(self._descriptors.values())

    def text_for(self, profile_id: str) -> str:
        """Profile body with any front matter removed.

        Raises:
            KeyError: If the profile is not registered
        """
        return self._texts[profile_id]

    def group_of(self, profile_id: str, rules: RuleSet = DEFAULT_RULES) -> str | None:
        """Mutex group of a profile, falling back to the rule set's groups."""
        descriptor = self._descriptors.get(profile_id)
        if descriptor is not None:
            return descriptor.mutex_group
        return rules.default_group_of(profile_id)


def _list_entries(source_dir: Path) -> list[str]:
    try:
        return os.listdir(source_dir)
    except OSError as e:
        raise RegistryError(
            RegistryError.UNREADABLE_SOURCE, f"Cannot enumerate {source_dir}: {e}"
        ) from e


def _read_entry(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _build_triggers(
    profile_id: str, front_matter_keywords: list[str], rules: RuleSet
) -> tuple[Trigger, ...]:
    triggers: list[Trigger] = []

    for project_type in ProjectType:
        if profile_id in rules.profiles_for_type(project_type):
            triggers.append(Trigger(TriggerKind.TYPE, project_type.value))

    for dimension in DIMENSIONS:
        table = rules.dimension_profiles.get(dimension, {})
        for value in sorted(table):
            if table[value] == profile_id:
                triggers.append(Trigger(TriggerKind.DIMENSION, dimension, value))

    for feature in sorted(rules.feature_profiles):
        if rules.feature_profiles[feature] == profile_id:
            triggers.append(Trigger(TriggerKind.FEATURE, feature, "true"))

    for pattern, ids in rules.keywords.items():
        if profile_id in ids:
            triggers.append(Trigger(TriggerKind.KEYWORD, pattern))

    # Front matter keywords are literals, rule keywords are patterns
    for keyword in front_matter_keywords:
        triggers.append(Trigger(TriggerKind.KEYWORD, re.escape(keyword.strip().lower())))

    return tuple(triggers)


def _parse_profile(
    profile_id: str, path: Path, raw: str, rules: RuleSet
) -> tuple[ProfileDescriptor, str]:
    try:
        front_matter, body = split_front_matter(raw)
    except ValueError as e:
        raise RegistryError(RegistryError.INVALID_FRONT_MATTER, f"{path.name}: {e}") from e

    mutex_group = front_matter.get("mutex_group", rules.default_group_of(profile_id))
    if mutex_group is not None and not isinstance(mutex_group, str):
        raise RegistryError(
            RegistryError.INVALID_FRONT_MATTER, f"{path.name}: mutex_group must be a string"
        )

    keywords = front_matter.get("keywords") or []
    if not isinstance(keywords, list) or not all(isinstance(k, str) for k in keywords):
        raise RegistryError(
            RegistryError.INVALID_FRONT_MATTER, f"{path.name}: keywords must be a list of strings"
        )

    descriptor = ProfileDescriptor(
        id=profile_id,
        display_name=display_name_for(profile_id),
        source_location=path,
        mutex_group=mutex_group,
        triggers=_build_triggers(profile_id, keywords, rules),
    )
    return descriptor, body


def load_registry(
    source_dir: Path | str,
    rules: RuleSet = DEFAULT_RULES,
    max_workers: int = 4,
) -> ProfileRegistry:
    """Load the profile catalog from a directory.

    Args:
        source_dir: Directory containing ``*-agent.md`` files
        rules: Rule set supplying default mutex groups and triggers
        max_workers: Thread pool size for reading entries (1 = sequential)

    Returns:
        ProfileRegistry ordered by raw entry name

    Raises:
        RegistryError: If the directory or an entry cannot be read
            (unreadable-source), two entries normalize to the same id
            (duplicate-id), or front matter is malformed (invalid-front-matter)
    """
    if max_workers <= 0:
        raise ValueError("max_workers must be positive")

    source_dir = Path(source_dir).expanduser()
    if not source_dir.is_dir():
        raise RegistryError(RegistryError.UNREADABLE_SOURCE, f"Not a directory: {source_dir}")

    entries: list[tuple[str, str]] = []
    seen: dict[str, str] = {}
    for name in sorted(_list_entries(source_dir)):
        profile_id = profile_id_from_entry(name)
        if profile_id is None:
            logger.debug(f"Skipping non-profile entry: {name}")
            continue
        if profile_id in seen:
            raise RegistryError(
                RegistryError.DUPLICATE_ID,
                f"Entries '{seen[profile_id]}' and '{name}' both normalize to id '{profile_id}'",
            )
        seen[profile_id] = name
        entries.append((profile_id, name))

    raw_texts: dict[str, str] = {}
    failures: dict[str, OSError | UnicodeDecodeError] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(_read_entry, source_dir / name): name for _, name in entries}
        for future in as_completed(futures):
            name = futures[future]
            try:
                raw_texts[name] = future.result()
            except (OSError, UnicodeDecodeError) as e:
                failures[name] = e

    if failures:
        # Report the lexically first failure so the error is stable
        name = min(failures)
        raise RegistryError(
            RegistryError.UNREADABLE_SOURCE, f"Cannot read {source_dir / name}: {failures[name]}"
        ) from failures[name]

    descriptors = []
    texts = {}
    for profile_id, name in entries:
        descriptor, body = _parse_profile(profile_id, source_dir / name, raw_texts[name], rules)
        descriptors.append(descriptor)
        texts[profile_id] = body

    logger.debug(f"Loaded {len(descriptors)} profiles from {source_dir}")
    return ProfileRegistry(descriptors, texts, source_dir=source_dir)


__all__ = [
    "AGENT_SUFFIX",
    "ProfileRegistry",
    "display_name_for",
    "load_registry",
    "profile_id_from_entry",
    "split_front_matter",
]
