"""Structural parser for JavaScript / TypeScript built on Tree-sitter.

Turns the text of one source file into a :class:`~autodoc_engine.models.ParsedFile`:

- imports with their module specifier and the local names they bind
- classes (bare or export-wrapped) with their method names
- functions, both declared and bound to a variable as an arrow /
  function expression

Tree-sitter is error tolerant, so a tree that contains ``ERROR`` or
``MISSING`` nodes is rejected with :class:`ParseError` rather than
half-analysed.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import PurePath
from typing import Any, Callable, Dict, List, Optional, Tuple

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Parser as TSParser

from .config import DEFAULT_GRAMMAR, GRAMMAR_BY_SUFFIX
from .errors import ParseError
from .models import (
    ANONYMOUS_CLASS,
    ANONYMOUS_FUNCTION,
    PLACEHOLDER_PARAM,
    ParsedClass,
    ParsedFile,
    ParsedFunction,
    ParsedImport,
    Range,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Node kinds
# ---------------------------------------------------------------------------
CLASS_DECLARATIONS = frozenset({"class_declaration", "abstract_class_declaration"})
FUNCTION_DECLARATIONS = frozenset({"function_declaration", "generator_function_declaration"})
VARIABLE_DECLARATIONS = frozenset({"lexical_declaration", "variable_declaration"})
# ``function`` is the pre-0.21 grammar name of ``function_expression``.
FUNCTION_VALUES = frozenset({"arrow_function", "function_expression", "function", "generator_function"})
ANONYMOUS_CLASS_VALUES = frozenset({"class"})
# `export default () => {}` is an expression, not a declaration.
ANONYMOUS_FUNCTION_VALUES = FUNCTION_VALUES - {"arrow_function"}
ACCESSOR_KEYWORDS = frozenset({"get", "set"})
# Bodiless methods (overloads, `declare class` members) are `method_signature`.
METHOD_MEMBERS = frozenset({"method_definition", "method_signature"})
EXPORTABLE_DECLARATIONS = CLASS_DECLARATIONS | FUNCTION_DECLARATIONS | VARIABLE_DECLARATIONS


# Map grammar name -> callable returning the tree-sitter language capsule
_GRAMMAR_LOADERS: Dict[str, Callable[[], Any]] = {
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
    "javascript": tree_sitter_javascript.language,
}


@lru_cache(maxsize=None)
def load_language(grammar: str) -> Language:
    """Return the compiled grammar for *grammar*, loading it once."""
    try:
        loader = _GRAMMAR_LOADERS[grammar]
    except KeyError:
        raise ValueError(f"No tree-sitter grammar mapped for '{grammar}'") from None
    language = Language(loader())
    logger.debug("Loaded tree-sitter grammar for %s", grammar)
    return language


def grammar_for(path: str) -> str:
    """Pick the grammar used for *path* from its suffix."""
    return GRAMMAR_BY_SUFFIX.get(PurePath(path).suffix.lower(), DEFAULT_GRAMMAR)


# ===================================================================
# Source parser
# ===================================================================

class SourceParser:
    """Extract imports, classes and functions from one file's text.

    Instances hold no per-file state: every :meth:`parse_file` call builds
    its own tree-sitter parser, so one instance can be shared between
    threads parsing different files.
    """

    def parse_file(self, content: str, path: str) -> ParsedFile:
        """Parse *content* (the text of *path*) into a :class:`ParsedFile`.

        Raises:
            ParseError: *content* is not valid source for the grammar
                selected by *path*.
        """
        try:
            source_bytes = content.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ParseError(path, f"source is not encodable as UTF-8 ({exc.reason})") from exc

        tree = TSParser(load_language(grammar_for(path))).parse(source_bytes)
        root = tree.root_node
        if root.has_error:
            bad = _first_error(root)
            offsets = _OffsetMap(content, source_bytes)
            position = offsets.char(bad.start_byte) if bad is not None else None
            raise ParseError(path, "syntax error", position)

        collector = _Collector(_OffsetMap(content, source_bytes))
        collector.visit(root)
        return ParsedFile(
            path=path,
            imports=tuple(collector.imports),
            classes=tuple(collector.classes),
            functions=tuple(collector.functions),
        )


# ===================================================================
# Traversal
# ===================================================================

class _Collector:
    """Walks one syntax tree in document order, dispatching on node kind.

    Only child lists are followed, never parent links, so every node is
    visited exactly once. The walk keeps its own stack, so deeply nested
    expressions do not run into the interpreter's recursion limit. A
    handler returns the node whose children remain to be walked, or
    ``None``.
    """

    def __init__(self, offsets: "_OffsetMap") -> None:
        self.offsets = offsets
        self.imports: List[ParsedImport] = []
        self.classes: List[ParsedClass] = []
        self.functions: List[ParsedFunction] = []
        self._dispatch: Dict[str, Callable[[Any], Optional[Any]]] = {
            "import_statement": self._visit_import,
            "export_statement": self._visit_export,
        }
        for kind in CLASS_DECLARATIONS:
            self._dispatch[kind] = self._visit_class
        for kind in FUNCTION_DECLARATIONS:
            self._dispatch[kind] = self._visit_function
        for kind in VARIABLE_DECLARATIONS:
            self._dispatch[kind] = self._visit_variables

    def visit(self, root: Any) -> None:
        stack = [root]
        while stack:
            node = stack.pop()
            handler = self._dispatch.get(node.type)
            descend = node if handler is None else handler(node)
            if descend is not None:
                # Reversed so the leftmost child is popped first.
                stack.extend(reversed(descend.children))

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _visit_import(self, node: Any) -> Optional[Any]:
        source_node = node.child_by_field_name("source")
        specifiers: List[str] = []
        for child in node.named_children:
            if child.type == "import_clause":
                specifiers.extend(_import_clause_bindings(child))
            elif child.type == "import_require_clause":
                # import x = require("y")
                source_node = child.child_by_field_name("source")
                ident = _first_child_of_type(child, "identifier")
                if ident is not None:
                    specifiers.append(_text(ident))
        if source_node is not None:
            self.imports.append(ParsedImport(
                source=_string_value(source_node),
                specifiers=tuple(specifiers),
            ))
        return node

    def _visit_export(self, node: Any) -> Optional[Any]:
        target = node.child_by_field_name("declaration")
        if target is None:
            target = node.child_by_field_name("value")
        if target is None:
            # export { a, b } / export * from "x"
            return node
        if target.type == "ambient_declaration":
            # export declare class X {}
            inner = _first_child_of_kinds(target, EXPORTABLE_DECLARATIONS)
            if inner is not None:
                target = inner

        if target.type in CLASS_DECLARATIONS or target.type in ANONYMOUS_CLASS_VALUES:
            self._add_class(target, wrapper=node)
        elif target.type in FUNCTION_DECLARATIONS or target.type in ANONYMOUS_FUNCTION_VALUES:
            self._add_function(target, wrapper=node)
        elif target.type in VARIABLE_DECLARATIONS:
            self._add_variable_functions(target, wrapper=node)
        else:
            return node
        # The declaration itself is recorded; only its contents remain.
        return target

    def _visit_class(self, node: Any) -> Optional[Any]:
        self._add_class(node, wrapper=None)
        return node

    def _visit_function(self, node: Any) -> Optional[Any]:
        self._add_function(node, wrapper=None)
        return node

    def _visit_variables(self, node: Any) -> Optional[Any]:
        self._add_variable_functions(node, wrapper=None)
        return node

    # ------------------------------------------------------------------
    # Record builders
    # ------------------------------------------------------------------

    def _add_class(self, class_node: Any, wrapper: Optional[Any]) -> None:
        name_node = class_node.child_by_field_name("name")
        body = class_node.child_by_field_name("body")
        methods: List[str] = []
        if body is not None:
            for member in body.named_children:
                if member.type not in METHOD_MEMBERS or _is_accessor(member):
                    continue
                method_name = member.child_by_field_name("name")
                if method_name is not None:
                    methods.append(_property_name(method_name))

        self.classes.append(ParsedClass(
            name=_text(name_node) if name_node is not None else ANONYMOUS_CLASS,
            methods=tuple(methods),
            is_exported=wrapper is not None,
            range=self._range(wrapper if wrapper is not None else class_node),
        ))

    def _add_function(self, func_node: Any, wrapper: Optional[Any]) -> None:
        name_node = func_node.child_by_field_name("name")
        self.functions.append(ParsedFunction(
            name=_text(name_node) if name_node is not None else ANONYMOUS_FUNCTION,
            params=_parameter_names(func_node),
            is_async=_is_async(func_node),
            is_exported=wrapper is not None,
            range=self._range(wrapper if wrapper is not None else func_node),
        ))

    def _add_variable_functions(self, decl_node: Any, wrapper: Optional[Any]) -> None:
        """One function per declarator initialised with a function value."""
        span = self._range(wrapper if wrapper is not None else decl_node)
        for declarator in decl_node.named_children:
            if declarator.type != "variable_declarator":
                continue
            value = declarator.child_by_field_name("value")
            if value is None or value.type not in FUNCTION_VALUES:
                continue
            name_node = declarator.child_by_field_name("name")
            name = _text(name_node) if name_node is not None and name_node.type == "identifier" else ANONYMOUS_FUNCTION
            self.functions.append(ParsedFunction(
                name=name,
                params=_parameter_names(value),
                is_async=_is_async(value),
                is_exported=wrapper is not None,
                range=span,
            ))

    def _range(self, node: Any) -> Range:
        return (self.offsets.char(node.start_byte), self.offsets.char(node.end_byte))


# ===================================================================
# Shared Helpers
# ===================================================================

class _OffsetMap:
    """Convert tree-sitter byte offsets to ``str`` indices."""

    def __init__(self, text: str, data: bytes) -> None:
        self._data = data
        self._ascii = len(data) == len(text)
        self._cache: Dict[int, int] = {}

    def char(self, byte_offset: int) -> int:
        if self._ascii:
            return byte_offset
        if byte_offset not in self._cache:
            self._cache[byte_offset] = len(self._data[:byte_offset].decode("utf-8"))
        return self._cache[byte_offset]


def _text(node: Any) -> str:
    return node.text.decode("utf-8")


def _string_value(node: Any) -> str:
    """Strip the quotes from a string literal node."""
    raw = _text(node)
    if len(raw) >= 2 and raw[0] in "'\"`" and raw[-1] == raw[0]:
        return raw[1:-1]
    return raw


def _first_child_of_type(node: Any, kind: str) -> Optional[Any]:
    for child in node.named_children:
        if child.type == kind:
            return child
    return None


def _first_child_of_kinds(node: Any, kinds: frozenset) -> Optional[Any]:
    for child in node.named_children:
        if child.type in kinds:
            return child
    return None


def _property_name(key: Any) -> str:
    """Method key without the ``#`` of private names or the quotes of string keys."""
    if key.type == "private_property_identifier":
        return _text(key).lstrip("#")
    if key.type == "string":
        return _string_value(key)
    return _text(key)


def _import_clause_bindings(clause: Any) -> List[str]:
    """Local names bound by ``default, * as ns, { a, b as c }``."""
    names: List[str] = []
    for child in clause.named_children:
        if child.type == "identifier":
            names.append(_text(child))
        elif child.type == "namespace_import":
            ident = _first_child_of_type(child, "identifier")
            if ident is not None:
                names.append(_text(ident))
        elif child.type == "named_imports":
            for spec in child.named_children:
                if spec.type != "import_specifier":
                    continue
                local = spec.child_by_field_name("alias")
                if local is None:
                    local = spec.child_by_field_name("name")
                if local is not None:
                    names.append(_text(local))
    return names


def _is_accessor(method: Any) -> bool:
    return any(child.type in ACCESSOR_KEYWORDS for child in method.children if not child.is_named)


def _is_async(func_node: Any) -> bool:
    return any(child.type == "async" for child in func_node.children if not child.is_named)


def _parameter_names(func_node: Any) -> Tuple[str, ...]:
    """Simple parameter names; anything else becomes ``PLACEHOLDER_PARAM``."""
    params = func_node.child_by_field_name("parameters")
    if params is None:
        # Unparenthesised arrow: x => x
        single = func_node.child_by_field_name("parameter")
        return (_parameter_name(single),) if single is not None else ()
    return tuple(
        _parameter_name(p) for p in params.named_children if p.type != "comment"
    )


def _parameter_name(param: Any) -> str:
    if param.type == "identifier":
        return _text(param)
    if param.type in ("required_parameter", "optional_parameter"):
        pattern = param.child_by_field_name("pattern")
        if (
            pattern is not None
            and pattern.type == "identifier"
            and param.child_by_field_name("value") is None
        ):
            return _text(pattern)
    return PLACEHOLDER_PARAM


def _first_error(root: Any) -> Optional[Any]:
    """Depth-first search for the first ``ERROR`` or ``MISSING`` node."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(
            child for child in reversed(node.children) if child.has_error or child.is_missing
        )
    return None
