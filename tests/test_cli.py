"""Integration tests for CLI commands."""

import json
import logging
from pathlib import Path

from typer.testing import CliRunner

from autodoc_engine import __version__
from autodoc_engine.cli import app


runner = CliRunner()


def _fixture_files(sample_project_path: Path):
    return sorted(str(p) for p in (sample_project_path / "src").rglob("*.ts"))


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_verbose_is_a_global_option(self, temp_dir: Path):
        src = temp_dir / "a.ts"
        src.write_text("export function a() {}\n", encoding="utf-8")
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        try:
            result = runner.invoke(app, ["--verbose", "analyze", str(src)])
        finally:
            root.handlers[:] = handlers
            root.setLevel(level)

        assert result.exit_code == 0
        assert "Files: 1 parsed | 0 failed" in result.stdout


class TestAnalyzeCommand:
    """Tests for 'autodoc-engine analyze'."""

    def test_analyze_json(self, sample_project_path: Path):
        files = _fixture_files(sample_project_path)
        result = runner.invoke(app, ["analyze", *files, "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert len(payload["files"]) == len(files)
        assert payload["failed"] == {}
        utils = next(f for f in payload["files"] if f["path"].endswith("utils.ts"))
        assert [fn["name"] for fn in utils["functions"]] == ["validateEmail", "slugify"]
        node = next(n for n in payload["graph"] if n["path"].endswith("models.ts"))
        assert len(node["imported_by"]) == 1

    def test_analyze_table(self, sample_project_path: Path):
        result = runner.invoke(app, ["analyze", *_fixture_files(sample_project_path)])

        assert result.exit_code == 0
        assert "Files: 5 parsed | 0 failed" in result.stdout

    def test_analyze_reports_parse_failures(self, temp_dir: Path):
        good = temp_dir / "good.ts"
        good.write_text("export function ok() {}\n", encoding="utf-8")
        bad = temp_dir / "bad.ts"
        bad.write_text("class {", encoding="utf-8")

        result = runner.invoke(app, ["analyze", str(good), str(bad)])

        assert result.exit_code == 0
        assert "1 parsed | 1 failed" in result.stdout

    def test_analyze_nonexistent_path(self):
        result = runner.invoke(app, ["analyze", "/nonexistent/file.ts"])
        assert result.exit_code != 0

    def test_invalid_config(self, temp_dir: Path):
        src = temp_dir / "a.ts"
        src.write_text("export const x = 1;\n", encoding="utf-8")
        config = temp_dir / "bad.toml"
        config.write_text("[engine]\nmax_chunk_size = -1\n", encoding="utf-8")

        result = runner.invoke(app, ["analyze", str(src), "--config", str(config)])
        assert result.exit_code != 0


class TestChunksCommand:
    def test_chunks_of_class_file(self, sample_project_path: Path):
        target = sample_project_path / "src" / "models.ts"
        result = runner.invoke(app, ["chunks", str(target)])

        assert result.exit_code == 0
        assert "--- class: User" in result.stdout
        assert "describe(): string" in result.stdout

    def test_module_fallback_respects_size(self, temp_dir: Path):
        src = temp_dir / "const.ts"
        src.write_text("export const answer = 42;\n", encoding="utf-8")

        result = runner.invoke(app, ["chunks", str(src), "--max-chunk-size", "6"])

        assert result.exit_code == 0
        assert f"--- module: {src} (6 chars)" in result.stdout


class TestDepsCommand:
    def test_deps_of_service(self, sample_project_path: Path):
        files = _fixture_files(sample_project_path)
        target = next(f for f in files if f.endswith("userService.ts"))

        result = runner.invoke(app, ["deps", *files, "--target", target])

        assert result.exit_code == 0
        assert "models.ts" in result.stdout
        assert result.stdout.count("utils.ts") == 2
        assert "Dependents of" in result.stdout

    def test_deps_unknown_target(self, sample_project_path: Path):
        files = _fixture_files(sample_project_path)
        result = runner.invoke(app, ["deps", *files, "--target", "/elsewhere.ts"])
        assert result.exit_code != 0
