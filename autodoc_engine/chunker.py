"""Slice a parsed file's source into class / function chunks."""

from __future__ import annotations

from typing import List

from .config import DEFAULT_MAX_CHUNK_SIZE
from .models import ChunkType, CodeChunk, ParsedFile


class ChunkExtractor:
    """Cut one chunk per class, then one per function, out of the raw text.

    Files with neither yield a single ``module`` chunk holding the first
    ``max_chunk_size`` characters. Classes always come before functions,
    whatever their order in the source; sort by range to recover reading
    order.
    """

    def __init__(self, max_chunk_size: int = DEFAULT_MAX_CHUNK_SIZE) -> None:
        if max_chunk_size <= 0:
            raise ValueError(f"max_chunk_size must be positive, got {max_chunk_size}")
        self.max_chunk_size = max_chunk_size

    def chunk(self, parsed_file: ParsedFile, raw_content: str) -> List[CodeChunk]:
        # raw_content must be the exact text parsed_file was built from.
        chunks: List[CodeChunk] = []
        for cls in parsed_file.classes:
            start, end = cls.range
            chunks.append(CodeChunk(ChunkType.CLASS, cls.name, raw_content[start:end]))
        for func in parsed_file.functions:
            start, end = func.range
            chunks.append(CodeChunk(ChunkType.FUNCTION, func.name, raw_content[start:end]))

        if not chunks:
            chunks.append(self.module_chunk(parsed_file.path, raw_content))
        return chunks

    def module_chunk(self, path: str, raw_content: str) -> CodeChunk:
        """Whole-file fallback, truncated to ``max_chunk_size``."""
        return CodeChunk(ChunkType.MODULE, path, raw_content[: self.max_chunk_size])
