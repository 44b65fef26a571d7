"""Structural code analysis for JavaScript / TypeScript documentation tooling."""

from .analyzer import ProjectAnalysis, ProjectAnalyzer
from .chunker import ChunkExtractor
from .errors import AnalysisError, ConfigError, ParseError
from .graph import DependencyGraph
from .models import (
    ChunkType,
    CodeChunk,
    FileNode,
    ParsedClass,
    ParsedFile,
    ParsedFunction,
    ParsedImport,
    SourceFile,
)
from .parser import SourceParser

__version__ = "1.0.0"

__all__ = [
    "AnalysisError",
    "ChunkExtractor",
    "ChunkType",
    "CodeChunk",
    "ConfigError",
    "DependencyGraph",
    "FileNode",
    "ParseError",
    "ParsedClass",
    "ParsedFile",
    "ParsedFunction",
    "ParsedImport",
    "ProjectAnalysis",
    "ProjectAnalyzer",
    "SourceFile",
    "SourceParser",
    "__version__",
]
