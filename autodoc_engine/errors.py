"""Exception types raised by the analysis engine."""

from __future__ import annotations

from typing import Optional


class AnalysisError(Exception):
    """Base class for every error raised by :mod:`autodoc_engine`."""


class ParseError(AnalysisError):
    """Source text could not be turned into a valid syntax tree."""

    def __init__(self, path: str, message: str, position: Optional[int] = None) -> None:
        self.path = path
        self.position = position
        where = f" at offset {position}" if position is not None else ""
        super().__init__(f"{path}: {message}{where}")


class ConfigError(AnalysisError):
    """Engine configuration holds an invalid value."""
