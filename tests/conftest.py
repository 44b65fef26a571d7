"""Pytest configuration and fixtures for autodoc-engine tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator, List

import pytest

from autodoc_engine.models import SourceFile
from autodoc_engine.parser import SourceParser


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def parser() -> SourceParser:
    return SourceParser()


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to sample test project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def sample_sources(sample_project_path: Path) -> List[SourceFile]:
    """Every fixture source file, loaded as (path, content) pairs in a stable order."""
    files = sorted(
        p for p in (sample_project_path / "src").rglob("*") if p.suffix in (".ts", ".js")
    )
    return [SourceFile(path=p.as_posix(), content=p.read_text(encoding="utf-8")) for p in files]


@pytest.fixture
def sample_ts_code() -> str:
    """Sample TypeScript module mixing classes, functions and imports."""
    return '''import { Logger } from "./logger";
import * as path from "path";

export const resolveAll = (base: string, ...parts: string[]) => path.join(base, ...parts);

export class Repository {
    private items: string[] = [];

    add(item: string): void {
        this.items.push(item);
    }

    get size(): number {
        return this.items.length;
    }

    async flush(logger: Logger) {
        logger.info(`flushing ${this.items.length}`);
        this.items = [];
    }
}

function internalHelper(value, fallback = "none") {
    return value ?? fallback;
}
'''
