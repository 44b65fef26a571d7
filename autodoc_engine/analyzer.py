"""Run parser, graph and chunker over a whole corpus of loaded files."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from .chunker import ChunkExtractor
from .config_manager import EngineConfig
from .errors import ParseError
from .graph import DependencyGraph
from .models import CodeChunk, ParsedClass, ParsedFile, ParsedFunction, SourceFile
from .parser import SourceParser

logger = logging.getLogger(__name__)


@dataclass
class ProjectAnalysis:
    """Everything the engine derived from one corpus."""

    parsed: List[ParsedFile]
    graph: DependencyGraph
    chunks: Dict[str, List[CodeChunk]]
    failed: Dict[str, str] = field(default_factory=dict)

    def get_parsed(self, path: str) -> Optional[ParsedFile]:
        for parsed in self.parsed:
            if parsed.path == path:
                return parsed
        return None

    def exported_symbols(self, path: str) -> List[Union[ParsedClass, ParsedFunction]]:
        """Exported classes, then exported functions, of *path*."""
        parsed = self.get_parsed(path)
        if parsed is None:
            return []
        return [c for c in parsed.classes if c.is_exported] + [
            f for f in parsed.functions if f.is_exported
        ]

    def all_chunks(self) -> List[CodeChunk]:
        return [chunk for chunks in self.chunks.values() for chunk in chunks]


class ProjectAnalyzer:
    """Parse every file, build the import graph over the parseable ones,
    and chunk each file.

    A file that fails to parse is reported in ``failed`` and still gets a
    single ``module`` chunk with its raw text.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.max_workers = max_workers
        self.parser = SourceParser()
        self.chunker = ChunkExtractor(self.config.max_chunk_size)

    def analyze(self, files: Sequence[SourceFile]) -> ProjectAnalysis:
        results = self._parse_all(files)

        failed: Dict[str, str] = {}
        parsed: List[ParsedFile] = []
        for source, result in zip(files, results):
            if isinstance(result, ParseError):
                logger.warning("Could not parse %s, skipping structural analysis: %s", source.path, result)
                failed[source.path] = str(result)
            else:
                parsed.append(result)

        graph = DependencyGraph(self.config.resolve_extensions)
        graph.build(parsed)

        # Each source is chunked against its own parse result, never another
        # file's that happens to share its path.
        chunks: Dict[str, List[CodeChunk]] = {}
        for source, result in zip(files, results):
            if isinstance(result, ParseError):
                chunks[source.path] = [self.chunker.module_chunk(source.path, source.content)]
            else:
                chunks[source.path] = self.chunker.chunk(result, source.content)

        logger.info(
            "Analyzed %d files (%d parsed, %d failed)", len(files), len(parsed), len(failed)
        )
        return ProjectAnalysis(parsed=parsed, graph=graph, chunks=chunks, failed=failed)

    def _parse_all(self, files: Sequence[SourceFile]) -> List[Union[ParsedFile, ParseError]]:
        """Parse in input order; ``ParseError`` is returned in place of a result."""
        if not files:
            return []
        if self.max_workers is None or self.max_workers <= 1:
            return [self._parse_one(f) for f in files]

        results: List[Optional[Union[ParsedFile, ParseError]]] = [None] * len(files)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(self._parse_one, source): i
                for i, source in enumerate(files)
            }
            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()
        return results  # type: ignore[return-value]

    def _parse_one(self, source: SourceFile) -> Union[ParsedFile, ParseError]:
        try:
            return self.parser.parse_file(source.content, source.path)
        except ParseError as exc:
            return exc
