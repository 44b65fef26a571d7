"""Load engine settings from an optional ``.autodoc.toml`` file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import toml

from .config import CONFIG_FILENAME, DEFAULT_MAX_CHUNK_SIZE, DEFAULT_RESOLVE_EXTENSIONS
from .errors import ConfigError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE
    resolve_extensions: Tuple[str, ...] = DEFAULT_RESOLVE_EXTENSIONS

    def with_overrides(self, max_chunk_size: Optional[int] = None) -> "EngineConfig":
        """Return a copy with CLI-level overrides applied."""
        if max_chunk_size is None:
            return self
        return _validated(replace(self, max_chunk_size=max_chunk_size))


def load_full_config(config_file: Path) -> Dict[str, Any]:
    """Load the entire TOML file, or an empty dict if it is missing or broken."""
    if not config_file.exists():
        return {}
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_file, exc)
        return {}


def load_engine_config(config_file: Optional[Path] = None) -> EngineConfig:
    """Build an :class:`EngineConfig` from the ``[engine]`` table.

    Args:
        config_file: Explicit TOML path. Defaults to ``.autodoc.toml`` in
            the current working directory.

    Returns:
        The merged configuration; defaults for every key that is absent.

    Raises:
        ConfigError: A key is present but holds an invalid value.
    """
    path = config_file or Path.cwd() / CONFIG_FILENAME
    section = load_full_config(path).get("engine", {})
    if not isinstance(section, dict):
        raise ConfigError(f"[engine] in {path} must be a table")

    unknown = set(section) - {"max_chunk_size", "resolve_extensions"}
    if unknown:
        logger.warning("Unknown [engine] keys in %s: %s", path, ", ".join(sorted(unknown)))

    config = EngineConfig()
    if "max_chunk_size" in section:
        config = replace(config, max_chunk_size=section["max_chunk_size"])
    if "resolve_extensions" in section:
        exts = section["resolve_extensions"]
        if not isinstance(exts, list) or not all(isinstance(e, str) and e for e in exts):
            raise ConfigError("resolve_extensions must be a list of non-empty strings")
        config = replace(config, resolve_extensions=tuple(exts))
    return _validated(config)


def _validated(config: EngineConfig) -> EngineConfig:
    size = config.max_chunk_size
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ConfigError(f"max_chunk_size must be a positive integer, got {size!r}")
    return config
