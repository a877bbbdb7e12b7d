"""Dispatcher settings loaded from a TOML configuration file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import tomllib
from platformdirs import user_config_dir

from .errors import ConfigError

DEFAULT_APP_NAME = "dispatch-core"
CONFIG_FILE_NAME = "config.toml"
CONFIG_ENV_VAR = "DISPATCH_CORE_CONFIG"
CONFIG_SECTION = "dispatcher"

logger = logging.getLogger(__name__)


def default_config_path() -> Path:
    """Return the platform-specific default config path."""

    base_dir = Path(user_config_dir(DEFAULT_APP_NAME, appauthor=False))
    return base_dir / CONFIG_FILE_NAME


def _load_section(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return {}
    section = data.get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{CONFIG_SECTION}] in {path} must be a table")
    return section


@dataclass(frozen=True)
class DispatcherConfig:
    """Tunables for :class:`~dispatch_core.events.EventDispatcher`."""

    default_priority: int = 0
    synchronized: bool = True
    trace: bool = False

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            expected = bool if item.type in ("bool", bool) else int
            # bool is an int subclass, so it must not pass for an int field
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise ConfigError(
                    f"{item.name} must be {expected.__name__}, got {type(value).__name__}"
                )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "DispatcherConfig":
        known = {item.name for item in fields(cls)}
        for key in values:
            if key not in known:
                logger.warning("ignoring unknown dispatcher setting %r", key)
        return cls(**{key: value for key, value in values.items() if key in known})

    @classmethod
    def load(
        cls,
        path: Path | str | None = None,
        env: Mapping[str, str] | None = None,
    ) -> "DispatcherConfig":
        """Read the ``[dispatcher]`` table from ``path``.

        Falls back to ``$DISPATCH_CORE_CONFIG`` and then the platform config
        directory. A missing file yields the defaults.
        """

        env = os.environ if env is None else env
        if path is None:
            override = env.get(CONFIG_ENV_VAR)
            path = Path(override).expanduser() if override else default_config_path()
        resolved = Path(path)
        logger.debug("loading dispatcher config from %s", resolved)
        return cls.from_mapping(_load_section(resolved))
