"""File-level import graph built from parsed files.

Each file gets an integer slot keyed by its normalized path; forward
(``imports``) and backward (``imported_by``) adjacency live in two lists
indexed by that slot. Only relative imports are resolved, and only against
files handed to :meth:`DependencyGraph.build`; everything else is treated
as an external package and produces no edge.
"""

from __future__ import annotations

import logging
import posixpath
from typing import Dict, Iterable, List, Optional, Sequence

from .config import DEFAULT_RESOLVE_EXTENSIONS
from .models import FileNode, ParsedFile

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """POSIX-normalize *path* (backslashes become separators)."""
    return posixpath.normpath(path.replace("\\", "/"))


def is_relative_specifier(source: str) -> bool:
    return source.startswith(".")


class DependencyGraph:
    """Bidirectional import graph over one fixed set of files."""

    def __init__(self, extensions: Optional[Iterable[str]] = None) -> None:
        self.extensions = tuple(DEFAULT_RESOLVE_EXTENSIONS if extensions is None else extensions)
        self._index: Dict[str, int] = {}
        self._paths: List[str] = []
        self._forward: List[List[int]] = []
        self._backward: List[List[int]] = []

    def build(self, files: Sequence[ParsedFile]) -> None:
        """Create one node per file, then resolve every file's imports.

        Replaces whatever a previous call built. Never raises: imports that
        do not resolve are silently left out.
        """
        self._index = {}
        self._paths = []
        unique: List[ParsedFile] = []
        for parsed in files:
            key = normalize_path(parsed.path)
            if key in self._index:
                logger.warning("Duplicate path %s in graph input, keeping the first", key)
                continue
            self._index[key] = len(self._paths)
            self._paths.append(key)
            unique.append(parsed)
        self._forward = [[] for _ in self._paths]
        self._backward = [[] for _ in self._paths]

        edges = 0
        for parsed in unique:
            importer = self._index[normalize_path(parsed.path)]
            for imp in parsed.imports:
                target = self.resolve(self._paths[importer], imp.source)
                if target is None:
                    continue
                slot = self._index[target]
                self._forward[importer].append(slot)
                if importer not in self._backward[slot]:
                    self._backward[slot].append(importer)
                edges += 1
        logger.debug("Built dependency graph: %d files, %d import edges", len(self._paths), edges)

    def resolve(self, importer: str, source: str) -> Optional[str]:
        """Map *source*, as imported from *importer*, to a known node path."""
        if not is_relative_specifier(source):
            return None
        candidate = normalize_path(posixpath.join(posixpath.dirname(importer), source))
        if candidate in self._index:
            return candidate
        for ext in self.extensions:
            with_ext = normalize_path(candidate + ext)
            if with_ext in self._index:
                return with_ext
        return None

    def get_dependencies(self, path: str) -> List[str]:
        """Files *path* imports, one entry per resolved import statement."""
        slot = self._index.get(normalize_path(path))
        if slot is None:
            return []
        return [self._paths[i] for i in self._forward[slot]]

    def get_dependents(self, path: str) -> List[str]:
        """Files importing *path*, each listed once."""
        slot = self._index.get(normalize_path(path))
        if slot is None:
            return []
        return [self._paths[i] for i in self._backward[slot]]

    def get_node(self, path: str) -> Optional[FileNode]:
        slot = self._index.get(normalize_path(path))
        return None if slot is None else self._node(slot)

    def get_all_nodes(self) -> List[FileNode]:
        return [self._node(slot) for slot in range(len(self._paths))]

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_path(path) in self._index

    def __len__(self) -> int:
        return len(self._paths)

    def _node(self, slot: int) -> FileNode:
        return FileNode(
            path=self._paths[slot],
            imports=tuple(self._paths[i] for i in self._forward[slot]),
            imported_by=tuple(self._paths[i] for i in self._backward[slot]),
        )
