"""Configuration management module.

This module handles project-local configuration stored in TOML format
(``vibecode.toml`` in the project root) and the YAML project description
that drives resolution.

Configuration is per project: nothing is read from or written to the home
directory, and nothing is written unless a command asks for it.

Config File Format:
    agents_dir = "docs/agents"          # catalog of *-agent.md profiles
    output_dir = "."                    # where generate writes artifacts
    rule_options = ["git", "testing", "security"]
    max_workers = 4                     # registry read concurrency
    core_profiles = ["testing"]         # optional, replaces default core set
    rules_file = "vibecode-rules.yaml"  # optional rule table overrides

Relative paths are resolved against the directory holding the config file.
"""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

try:
    import tomli  # type: ignore[import]
except ImportError:
    # Fallback for interpreters that bundle tomllib
    try:
        import tomllib as tomli  # type: ignore[import]
    except ImportError as e:
        raise ImportError("toml library not available. Install with: pip install tomli") from e

try:
    import tomlkit
except ImportError as e:
    raise ImportError("tomlkit library not available. Install with: pip install tomlkit") from e

try:
    import yaml
except ImportError:
    raise ImportError("PyYAML not available. Install with: pip install pyyaml")

from vibecode.content_synthesizer import DEFAULT_RULE_OPTIONS
from vibecode.exceptions import ConfigError
from vibecode.models.project_models import ProjectDescription
from vibecode.rule_tables import DEFAULT_RULES, RuleSet, load_rules

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "vibecode.toml"
CONFIG_KEYS = ("agents_dir", "output_dir", "rule_options", "max_workers", "core_profiles", "rules_file")


@dataclass
class VibecodeConfig:
    """Vibecode configuration data."""

    agents_dir: str = "docs/agents"
    output_dir: str = "."
    rule_options: list[str] = field(default_factory=lambda: list(DEFAULT_RULE_OPTIONS))
    max_workers: int = 4
    core_profiles: list[str] | None = None  # None keeps the rule set's core profiles
    rules_file: str | None = None
    base_dir: Path = field(default_factory=Path.cwd, compare=False, repr=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding None values and base_dir."""
        data = asdict(self)
        data.pop("base_dir")
        # Filter out None values as TOML doesn't support them
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any], base_dir: Path | None = None) -> "VibecodeConfig":
        """Create from dictionary.

        Raises:
            ConfigError: If a value has the wrong type
        """
        for key in sorted(set(data) - set(CONFIG_KEYS)):
            logger.warning(f"Ignoring unknown config key: {key}")

        config = cls(
            agents_dir=data.get("agents_dir", "docs/agents"),
            output_dir=data.get("output_dir", "."),
            rule_options=data.get("rule_options", list(DEFAULT_RULE_OPTIONS)),
            max_workers=data.get("max_workers", 4),
            core_profiles=data.get("core_profiles"),
            rules_file=data.get("rules_file"),
            base_dir=base_dir or Path.cwd(),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate field types and ranges.

        Raises:
            ConfigError: If validation fails
        """
        for name in ("agents_dir", "output_dir"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"{name} must be a non-empty string")

        if self.rules_file is not None and not isinstance(self.rules_file, str):
            raise ConfigError("rules_file must be a string")

        for name in ("rule_options", "core_profiles"):
            value = getattr(self, name)
            if value is None and name == "core_profiles":
                continue
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError(f"{name} must be a list of strings")

        if not isinstance(self.max_workers, int) or isinstance(self.max_workers, bool):
            raise ConfigError("max_workers must be an integer")
        if self.max_workers < 1:
            raise ConfigError("max_workers must be at least 1")

    def resolve_path(self, value: str) -> Path:
        """Resolve a configured path against the config file's directory."""
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        return path

    @property
    def agents_path(self) -> Path:
        return self.resolve_path(self.agents_dir)

    @property
    def output_path(self) -> Path:
        return self.resolve_path(self.output_dir)

    def load_rule_set(self) -> RuleSet:
        """Build the rule set this configuration describes.

        Raises:
            ConfigError: If the rules file cannot be loaded
        """
        rules = DEFAULT_RULES
        if self.rules_file:
            rules = load_rules(self.resolve_path(self.rules_file))
        if self.core_profiles is not None:
            rules = rules.with_core_profiles(self.core_profiles)
        return rules


class ConfigManager:
    """Manage the project-local vibecode.toml file."""

    @classmethod
    def get_config_path(cls, custom_path: str | None = None) -> Path:
        """Get configuration file path.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            Path to config file

        Raises:
            ConfigError: If a custom path is given but does not exist
        """
        if custom_path:
            path = Path(custom_path).expanduser().resolve()
            if not path.exists():
                raise ConfigError(f"Config file not found: {path}")
            return path

        return Path.cwd() / CONFIG_FILE_NAME

    @classmethod
    def load_config(cls, custom_path: str | None = None) -> VibecodeConfig:
        """Load configuration from file.

        Args:
            custom_path: Custom config file path (optional)

        Returns:
            VibecodeConfig object (defaults if the default file is absent)

        Raises:
            ConfigError: If loading fails
        """
        config_path = cls.get_config_path(custom_path)

        if not config_path.exists():
            logger.debug("Config file not found, using defaults")
            return VibecodeConfig()

        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)  # type: ignore[attr-defined]
        except (OSError, tomli.TOMLDecodeError) as e:  # type: ignore[attr-defined]
            raise ConfigError(f"Failed to load config {config_path}: {e}") from e

        logger.debug(f"Loaded config from: {config_path}")
        return VibecodeConfig.from_dict(data, base_dir=config_path.parent)

    @classmethod
    def save_config(
        cls, config: VibecodeConfig, custom_path: str | None = None, overwrite: bool = False
    ) -> Path:
        """Save configuration to file.

        Existing files keep their comments and any keys vibecode does not
        read. Settings ``config`` leaves unset are removed from the file.

        Args:
            config: Configuration to save
            custom_path: Custom config file path (optional)
            overwrite: Allow replacing values in an existing file

        Returns:
            Path written

        Raises:
            ConfigError: If the file exists and overwrite is False, or saving fails
        """
        config_path = (
            Path(custom_path).expanduser().resolve() if custom_path else Path.cwd() / CONFIG_FILE_NAME
        )

        if config_path.exists() and not overwrite:
            raise ConfigError(f"Config file already exists: {config_path}")

        temp_path = config_path.with_suffix(".tmp")
        try:
            if config_path.exists():
                with open(config_path) as f:
                    doc = tomlkit.load(f)
            else:
                doc = tomlkit.document()
                doc.add(tomlkit.comment("vibecode project configuration"))

            data = config.to_dict()
            for key in list(doc):
                if key in CONFIG_KEYS and key not in data:
                    del doc[key]
            for key, value in data.items():
                doc[key] = value

            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, "w") as f:
                tomlkit.dump(doc, f)

            # Atomic rename
            temp_path.replace(config_path)
            logger.debug(f"Saved config to: {config_path}")
            return config_path

        except Exception as e:
            if temp_path.exists():
                temp_path.unlink()
            raise ConfigError(f"Failed to save config: {e}") from e


def load_project_file(path: Path | str) -> ProjectDescription:
    """Load a project description from a YAML file.

    Example file:
        type: web
        dimensions:
          frontend: react
          backend: supabase
        features:
          authentication: true
        overrides:
          include: [firebase-backend]

    Args:
        path: Path to the project YAML file

    Returns:
        ProjectDescription instance

    Raises:
        ConfigError: If the file is missing, not valid YAML, or malformed
        UnknownValueError: If the project type is unknown
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise ConfigError(f"Project file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in project file {path}: {e}") from e

    if data is None:
        raise ConfigError(f"Project file is empty: {path}")

    return ProjectDescription.from_dict(data)


__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigError",
    "ConfigManager",
    "VibecodeConfig",
    "load_project_file",
]
