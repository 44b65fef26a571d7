"""Markdown summaries of a :class:`ProjectAnalysis` for documentation prompts."""

from __future__ import annotations

import posixpath
from typing import Iterable, List, Optional

from .analyzer import ProjectAnalysis
from .graph import normalize_path


def _display(path: str, root: Optional[str]) -> str:
    if root is None:
        return path
    return posixpath.relpath(normalize_path(path), normalize_path(root))


def _joined(items: Iterable[str], sep: str = ", ", empty: str = "None") -> str:
    text = sep.join(items)
    return text or empty


def file_context(analysis: ProjectAnalysis, path: str, root: Optional[str] = None) -> str:
    """Structural context block for one file.

    Returns an empty string when *path* was not parsed.
    """
    parsed = analysis.get_parsed(path)
    if parsed is None:
        return ""

    deps = [_display(d, root) for d in analysis.graph.get_dependencies(path)]
    dependents = [_display(d, root) for d in analysis.graph.get_dependents(path)]
    classes = [f"{c.name} ({', '.join(c.methods)})" for c in parsed.classes]

    lines: List[str] = [
        "### Structural Context",
        f"- **Classes**: {_joined(classes, sep='; ')}",
        f"- **Exported Functions**: {_joined(f.name for f in parsed.functions if f.is_exported)}",
        f"- **Internal Functions**: {_joined(f.name for f in parsed.functions if not f.is_exported)}",
        f"- **Dependencies (Imports)**: {_joined(deps)}",
        f"- **Dependents (Imported By)**: {_joined(dependents)}",
    ]
    return "\n".join(lines)


def project_summary(analysis: ProjectAnalysis, root: Optional[str] = None) -> str:
    """One ``### path`` section per parsed file listing its classes and functions."""
    sections = []
    for parsed in analysis.parsed:
        sections.append(
            f"### {_display(parsed.path, root)}\n"
            f"- Classes: {_joined((c.name for c in parsed.classes), empty='N/A')}\n"
            f"- Functions: {_joined((f.name for f in parsed.functions), empty='N/A')}"
        )
    return "\n".join(sections)
