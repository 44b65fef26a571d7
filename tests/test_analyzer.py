"""Tests for the corpus-level ProjectAnalyzer pipeline."""

from pathlib import Path
from typing import List

from autodoc_engine.analyzer import ProjectAnalyzer
from autodoc_engine.config_manager import EngineConfig
from autodoc_engine.models import ChunkType, SourceFile


def _src(sample_project_path: Path, rel: str) -> str:
    return (sample_project_path / "src" / rel).as_posix()


class TestSampleProject:
    """End-to-end analysis of tests/fixtures/sample_project."""

    def test_all_files_parse(self, sample_sources: List[SourceFile]):
        analysis = ProjectAnalyzer().analyze(sample_sources)

        assert analysis.failed == {}
        assert len(analysis.parsed) == len(sample_sources)
        assert len(analysis.graph) == len(sample_sources)

    def test_dependencies(self, sample_sources: List[SourceFile], sample_project_path: Path):
        graph = ProjectAnalyzer().analyze(sample_sources).graph
        service = _src(sample_project_path, "services/userService.ts")
        utils = _src(sample_project_path, "utils.ts")
        models = _src(sample_project_path, "models.ts")
        index = _src(sample_project_path, "index.ts")

        assert graph.get_dependencies(service) == [models, utils, utils]
        assert graph.get_dependents(utils) == [index, service]
        assert graph.get_dependencies(index) == [_src(sample_project_path, "services/index.ts"), utils]

    def test_reexport_file_has_no_dependencies(self, sample_sources, sample_project_path: Path):
        graph = ProjectAnalyzer().analyze(sample_sources).graph
        assert graph.get_dependencies(_src(sample_project_path, "services/index.ts")) == []

    def test_chunks(self, sample_sources: List[SourceFile], sample_project_path: Path):
        analysis = ProjectAnalyzer().analyze(sample_sources)

        constants = analysis.chunks[_src(sample_project_path, "constants.js")]
        assert [c.type for c in constants] == [ChunkType.MODULE]

        service = analysis.chunks[_src(sample_project_path, "services/userService.ts")]
        assert [(c.type, c.name) for c in service] == [(ChunkType.CLASS, "UserService")]
        assert len(analysis.all_chunks()) >= len(sample_sources)

    def test_exported_symbols(self, sample_sources: List[SourceFile], sample_project_path: Path):
        analysis = ProjectAnalyzer().analyze(sample_sources)
        names = [s.name for s in analysis.exported_symbols(_src(sample_project_path, "utils.ts"))]

        assert names == ["validateEmail", "slugify"]
        assert analysis.exported_symbols("/not/analyzed.ts") == []

    def test_parallel_matches_sequential(self, sample_sources: List[SourceFile]):
        sequential = ProjectAnalyzer().analyze(sample_sources)
        parallel = ProjectAnalyzer(max_workers=4).analyze(sample_sources)

        assert parallel.parsed == sequential.parsed
        assert parallel.chunks == sequential.chunks


class TestParseFailures:
    def test_broken_file_falls_back_to_raw_chunk(self):
        files = [
            SourceFile("/p/ok.ts", 'import { b } from "./broken";\nexport function ok() {}\n'),
            SourceFile("/p/broken.ts", "export function broken( {"),
        ]
        analysis = ProjectAnalyzer(EngineConfig(max_chunk_size=10)).analyze(files)

        assert list(analysis.failed) == ["/p/broken.ts"]
        assert [p.path for p in analysis.parsed] == ["/p/ok.ts"]
        assert analysis.chunks["/p/broken.ts"][0].type is ChunkType.MODULE
        assert analysis.chunks["/p/broken.ts"][0].content == "export fun"
        # Broken files are not graph nodes, so the import stays unresolved.
        assert analysis.graph.get_dependencies("/p/ok.ts") == []

    def test_duplicate_path_chunked_against_own_text(self):
        files = [
            SourceFile("/p/a.ts", "export class First { run() {} }\n"),
            SourceFile("/p/a.ts", "export function broken( {"),
        ]
        analysis = ProjectAnalyzer().analyze(files)

        assert list(analysis.failed) == ["/p/a.ts"]
        chunk, = analysis.chunks["/p/a.ts"]
        assert chunk.type is ChunkType.MODULE
        assert chunk.content == "export function broken( {"

    def test_deeply_nested_file_does_not_abort_run(self):
        terms = " + ".join(f'"s{i}"' for i in range(600))
        files = [
            SourceFile("/p/gen.ts", f"export const msg = {terms};\n"),
            SourceFile("/p/b.ts", 'import "./gen";\nexport function b() {}\n'),
        ]
        analysis = ProjectAnalyzer().analyze(files)

        assert analysis.failed == {}
        assert analysis.graph.get_dependencies("/p/b.ts") == ["/p/gen.ts"]

    def test_empty_corpus(self):
        analysis = ProjectAnalyzer(max_workers=2).analyze([])
        assert analysis.parsed == [] and analysis.chunks == {} and len(analysis.graph) == 0
