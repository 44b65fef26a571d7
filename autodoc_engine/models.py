"""Core data models produced by the parser, graph and chunker."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple

Range = Tuple[int, int]

ANONYMOUS_CLASS = "AnonymousClass"
ANONYMOUS_FUNCTION = "AnonymousFunction"
PLACEHOLDER_PARAM = "arg"


class ChunkType(str, Enum):
    CLASS = "class"
    FUNCTION = "function"
    MODULE = "module"
    OTHER = "other"


@dataclass(frozen=True)
class ParsedImport:
    source: str
    specifiers: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "specifiers": list(self.specifiers)}


@dataclass(frozen=True)
class ParsedClass:
    name: str
    methods: Tuple[str, ...]
    is_exported: bool
    range: Range

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "methods": list(self.methods),
            "is_exported": self.is_exported,
            "range": list(self.range),
        }


@dataclass(frozen=True)
class ParsedFunction:
    name: str
    params: Tuple[str, ...]
    is_async: bool
    is_exported: bool
    range: Range

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "params": list(self.params),
            "async": self.is_async,
            "is_exported": self.is_exported,
            "range": list(self.range),
        }


@dataclass(frozen=True)
class ParsedFile:
    path: str
    imports: Tuple[ParsedImport, ...] = ()
    classes: Tuple[ParsedClass, ...] = ()
    functions: Tuple[ParsedFunction, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "imports": [i.to_dict() for i in self.imports],
            "classes": [c.to_dict() for c in self.classes],
            "functions": [f.to_dict() for f in self.functions],
        }


@dataclass(frozen=True)
class FileNode:
    path: str
    imports: Tuple[str, ...] = ()
    imported_by: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "imports": list(self.imports),
            "imported_by": list(self.imported_by),
        }


@dataclass(frozen=True)
class CodeChunk:
    type: ChunkType
    name: str
    content: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type.value, "name": self.name, "content": self.content}


@dataclass(frozen=True)
class SourceFile:
    """A ``(path, content)`` pair handed to the engine by a caller."""

    path: str
    content: str = field(repr=False)
