"""
Serializer configuration loaded from ``.hydrald.toml``.

This module provides:

- find_config_file: Walk up directories to locate .hydrald.toml
- deep_merge: Recursively merge two dicts (override wins for leaf values)
- SerializerConfig: Resolved settings used by LdMapper
- ProjectConfig: Parsed config file with named profiles

Configuration is loaded from `.hydrald.toml` with optional
`.hydrald.local.toml` overrides. The resolution order is:

    built-in defaults → [serializer] → [profiles.NAME] → local overrides

Example:
    >>> config = ProjectConfig.load()
    >>> settings = config.resolve("pretty")
    >>> settings.indent
    2
"""

from __future__ import annotations

import dataclasses
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from hydrald.errors import ConfigError
from hydrald.keywords import DEFAULT_VOCAB

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".hydrald.toml"
LOCAL_CONFIG_FILENAME = ".hydrald.local.toml"


# ---------------------------------------------------------------------------
# Utility helpers
# ---------------------------------------------------------------------------


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """
    Walk up from *start_dir* to find `.hydrald.toml`.

    Args:
        start_dir: Directory to start searching from. Defaults to ``Path.cwd()``.

    Returns:
        Path to the config file, or ``None`` if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate

        parent = current.parent
        if parent == current:
            return None
        current = parent


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep-merge two dicts. *override* wins for leaf values.

    Neither input is mutated; a new dict is returned.
    """
    merged: dict[str, Any] = {}

    for key in base.keys() | override.keys():
        if key in base and key in override:
            base_val = base[key]
            over_val = override[key]
            if isinstance(base_val, dict) and isinstance(over_val, dict):
                merged[key] = deep_merge(base_val, over_val)
            else:
                merged[key] = over_val
        elif key in base:
            merged[key] = base[key]
        else:
            merged[key] = override[key]

    return merged


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SerializerConfig:
    """
    Settings for one LdMapper.

    Attributes:
        default_vocab: ``@vocab`` used when no annotation declares one.
            None disables the default.
        indent: Spaces per nesting level; None or 0 for compact output.
        include_none: Write ``None`` fields as ``null``.
        ensure_ascii: Escape non-ASCII characters.
    """

    default_vocab: str | None = DEFAULT_VOCAB
    indent: int | None = None
    include_none: bool = True
    ensure_ascii: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SerializerConfig:
        """
        Build settings from a flat dict, validating keys and types.

        Raises:
            ConfigError: On unknown keys or values of the wrong type.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(
                f"Unknown serializer settings: {', '.join(sorted(unknown))}. "
                f"Available settings: {', '.join(sorted(known))}"
            )

        values = dict(data)
        if "default_vocab" in values:
            vocab = values["default_vocab"]
            if not isinstance(vocab, str):
                raise ConfigError("default_vocab must be a string")
            values["default_vocab"] = vocab or None
        if "indent" in values:
            indent = values["indent"]
            if isinstance(indent, bool) or not isinstance(indent, int) or indent < 0:
                raise ConfigError("indent must be a non-negative integer")
            values["indent"] = indent or None
        for flag in ("include_none", "ensure_ascii"):
            if flag in values and not isinstance(values[flag], bool):
                raise ConfigError(f"{flag} must be true or false")

        return cls(**values)

    def with_overrides(self, **overrides: Any) -> SerializerConfig:
        """Return a copy with the given (non-None) settings replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)


@dataclass
class ProjectConfig:
    """
    Parsed ``.hydrald.toml`` with its profiles and local overrides.

    Typical usage::

        config = ProjectConfig.load()
        settings = config.resolve()           # base [serializer] only
        settings = config.resolve("pretty")   # with a named profile
    """

    serializer: dict[str, Any] = field(default_factory=dict)
    profiles: dict[str, dict[str, Any]] = field(default_factory=dict)
    _local_overrides: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def load(cls, start_dir: Path | None = None) -> ProjectConfig:
        """
        Find and load configuration, walking up from *start_dir*.

        Returns an empty configuration when no config file exists.
        """
        config_path = find_config_file(start_dir)
        if config_path is None:
            logger.debug(f"No {CONFIG_FILENAME} found, using defaults")
            return cls()
        return cls.load_file(config_path)

    @classmethod
    def load_file(cls, config_path: Path) -> ProjectConfig:
        """
        Load *config_path* and the local override file next to it.

        Raises:
            ConfigError: If a file is not valid TOML.
        """
        data = _read_toml(config_path)
        local_overrides: dict[str, Any] = {}
        local_path = config_path.parent / LOCAL_CONFIG_FILENAME
        if local_path.is_file():
            local_overrides = _read_toml(local_path)
        return cls.from_dict(data, local_overrides=local_overrides)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        local_overrides: dict[str, Any] | None = None,
    ) -> ProjectConfig:
        """Create a :class:`ProjectConfig` from parsed TOML data."""
        return cls(
            serializer=dict(data.get("serializer", {})),
            profiles={
                name: dict(profile)
                for name, profile in data.get("profiles", {}).items()
            },
            _local_overrides=local_overrides or {},
        )

    def resolve(self, profile: str | None = None) -> SerializerConfig:
        """
        Merge all layers into a :class:`SerializerConfig`.

        Raises:
            ConfigError: If *profile* is unknown or a setting is invalid.
        """
        settings = dict(self.serializer)

        if profile is not None:
            local_profiles = self._local_overrides.get("profiles", {})
            if profile not in self.profiles and profile not in local_profiles:
                available = ", ".join(self.list_profiles()) or "(none)"
                raise ConfigError(
                    f"Unknown profile {profile!r}. Available profiles: {available}"
                )
            settings = deep_merge(settings, self.profiles.get(profile, {}))

        settings = deep_merge(settings, self._local_overrides.get("serializer", {}))
        if profile is not None:
            local_profile = self._local_overrides.get("profiles", {}).get(profile, {})
            settings = deep_merge(settings, local_profile)

        return SerializerConfig.from_dict(settings)

    def list_profiles(self) -> list[str]:
        """Sorted names of all profiles, including local-only ones."""
        local_profiles = self._local_overrides.get("profiles", {})
        return sorted(set(self.profiles) | set(local_profiles))


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e
    logger.debug(f"Loaded configuration from {path}")
    return data
