"""Default settings for the analysis engine."""

from __future__ import annotations

import logging
import os
from typing import Tuple

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".autodoc.toml"


def env_positive_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, or fall back to *default*."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value <= 0:
        logger.warning("Ignoring %s=%r, expected a positive integer", name, raw)
        return default
    return value


DEFAULT_MAX_CHUNK_SIZE = env_positive_int("AUTODOC_MAX_CHUNK_SIZE", 4000)

# Suffixes tried, in order, when a relative import does not name a file exactly.
DEFAULT_RESOLVE_EXTENSIONS: Tuple[str, ...] = (
    ".ts",
    ".js",
    ".tsx",
    ".jsx",
    "/index.ts",
    "/index.js",
)

# Path suffix -> tree-sitter grammar name. Unlisted suffixes use TypeScript.
GRAMMAR_BY_SUFFIX = {
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
    ".jsx": "tsx",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
}
DEFAULT_GRAMMAR = "typescript"
