"""
Tree-sitter parser for Go source files.

Indexes top-level type declarations, named struct fields and import specs
by exact byte offsets.  The parsed tree is used only as a locator: every
mutation happens on the :class:`SourceUnit` byte buffer, and spans recorded
at parse time are translated through the unit's splice log when the buffer
has changed since.

Uses tree-sitter >= 0.22 API with the ``tree-sitter-go`` language package.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import tree_sitter as ts  # type: ignore
import tree_sitter_go  # type: ignore

from .errors import ParseFailure, ReadFailure

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Node kinds
# ---------------------------------------------------------------------------

_TYPE_SPEC_NODES = ("type_spec", "type_alias")

# Top-level declarations an import block may not follow.
_NON_IMPORT_DECLS = (
    "type_declaration",
    "function_declaration",
    "method_declaration",
    "const_declaration",
    "var_declaration",
)


# ---------------------------------------------------------------------------
# Language / parser lookup
# ---------------------------------------------------------------------------

# Cache Language and Parser objects to avoid repeated construction
_LANG_CACHE: dict[str, object] = {}
_PARSER_CACHE: dict[str, object] = {}


def _get_ts_language():
    """Return the tree_sitter.Language object for Go (cached)."""
    if "go" not in _LANG_CACHE:
        _LANG_CACHE["go"] = ts.Language(tree_sitter_go.language())
    return _LANG_CACHE["go"]


def _get_ts_parser():
    """Return a tree-sitter Parser configured for Go (cached)."""
    if "go" not in _PARSER_CACHE:
        _PARSER_CACHE["go"] = ts.Parser(_get_ts_language())
    return _PARSER_CACHE["go"]


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ImportEntry:
    """An import spec: the local alias bound to an import path."""
    alias: str
    path: str
    explicit: bool = False   # alias written in source (``f "fmt"``)


@dataclass(frozen=True)
class Declaration:
    """A top-level ``type`` spec."""
    name: str
    node: object

    @property
    def type_node(self):
        return self.node.child_by_field_name("type")

    @property
    def is_struct(self) -> bool:
        """True when the declared type is a struct literal (not an alias)."""
        type_node = self.type_node
        return (
            self.node.type == "type_spec"
            and type_node is not None
            and type_node.type == "struct_type"
        )


@dataclass(frozen=True)
class Member:
    """A named struct field and the span of its type expression."""
    name: str
    type_node: object
    start: int
    end: int

    @property
    def span(self) -> tuple[int, int]:
        return self.start, self.end


@dataclass
class SourceUnit:
    """One file's parse tree plus its current byte buffer.

    ``original`` never changes; ``buffer`` starts as a copy of it and is
    mutated by :meth:`splice`.  Every splice is logged in the coordinates
    that were current when it was applied, so a span taken from the tree
    can be replayed forward with :meth:`locate`.
    """
    path: str
    tree: object
    original: bytes
    buffer: bytearray = field(default_factory=bytearray)
    imports: list[ImportEntry] = field(default_factory=list)
    splices: list[tuple[int, int, int]] = field(default_factory=list)

    @property
    def root(self):
        return self.tree.root_node

    @property
    def modified(self) -> bool:
        return bytes(self.buffer) != self.original

    def source(self) -> bytes:
        return bytes(self.buffer)

    def locate(self, start: int, end: int) -> tuple[int, int]:
        """Translate an original-buffer span into current-buffer coordinates.

        Raises ValueError when an applied splice overlaps the span, since the
        bytes it referred to no longer exist.
        """
        for s_start, s_end, s_len in self.splices:
            if end <= s_start:
                continue
            if start >= s_end:
                delta = s_len - (s_end - s_start)
                start += delta
                end += delta
                continue
            raise ValueError(
                f"span [{start}, {end}) overlaps an applied splice "
                f"[{s_start}, {s_end})"
            )
        return start, end

    def splice(self, start: int, end: int, data: bytes) -> None:
        """Replace ``buffer[start:end]`` (current coordinates) with *data*."""
        if not 0 <= start <= end <= len(self.buffer):
            raise ValueError(
                f"splice [{start}, {end}) outside buffer of {len(self.buffer)} bytes"
            )
        self.buffer[start:end] = data
        self.splices.append((start, end, len(data)))


# ---------------------------------------------------------------------------
# Node helpers
# ---------------------------------------------------------------------------

def _text(node) -> str:
    """Decode a tree-sitter Node's text as UTF-8."""
    if node is None:
        return ""
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def _first_error(node):
    """Return the first ERROR or MISSING node under *node*, or None."""
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node


def _unquote(literal: str) -> str:
    return literal.strip().strip("\"`")


def _starts_line(node) -> bool:
    """True when no other named node ends on the line where *node* starts."""
    before = node.prev_named_sibling
    return before is None or before.end_point[0] < node.start_point[0]


def _type_specs(decl_node):
    """Yield the type_spec / type_alias children of a type_declaration."""
    for child in decl_node.named_children:
        if child.type in _TYPE_SPEC_NODES:
            yield child
        elif child.type == "type_spec_list":
            # grouped form: type ( A struct{...}; B int )
            for spec in child.named_children:
                if spec.type in _TYPE_SPEC_NODES:
                    yield spec


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_tree(source: bytes):
    """Parse *source* without validating it.

    Used to relocate declarations in a buffer that may contain opaque
    replacement text.
    """
    return _get_ts_parser().parse(bytes(source))


def parse(source: bytes, path: str = "") -> SourceUnit:
    """
    Parse raw Go source and return a :class:`SourceUnit`.

    Parameters
    ----------
    source:
        Raw bytes of the file.
    path:
        File path used in error messages.

    Raises
    ------
    ParseFailure
        If the tree contains a syntax error or a missing token.
    """
    source = bytes(source)
    tree = parse_tree(source)
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root)
        row, col = bad.start_point
        label = "missing " + bad.type if bad.is_missing else "syntax error"
        raise ParseFailure(
            f"parse file: {path or '<source>'}:{row + 1}:{col + 1}: {label}"
        )

    unit = SourceUnit(
        path=path,
        tree=tree,
        original=source,
        buffer=bytearray(source),
    )
    unit.imports = import_entries(root)
    logger.debug(
        "Parsed %s: %d bytes, %d import(s)",
        path or "<source>", len(source), len(unit.imports),
    )
    return unit


def parse_file(path: str) -> SourceUnit:
    """
    Read and parse a single Go file.

    Raises
    ------
    ReadFailure
        If the file cannot be read.
    ParseFailure
        If the file is not valid Go.
    """
    try:
        with open(path, "rb") as fh:
            source = fh.read()
    except OSError as exc:
        raise ReadFailure(f"read file: {path}: {exc}") from exc
    return parse(source, path)


# ---------------------------------------------------------------------------
# Declarations and members
# ---------------------------------------------------------------------------

def declarations(unit: SourceUnit) -> list[Declaration]:
    """Return every top-level type spec in file order."""
    result: list[Declaration] = []
    for node in unit.root.named_children:
        if node.type != "type_declaration":
            continue
        for spec in _type_specs(node):
            name = _text(spec.child_by_field_name("name"))
            if name:
                result.append(Declaration(name=name, node=spec))
    return result


def declaration_names(unit: SourceUnit) -> list[str]:
    """Names of all top-level type declarations, in file order."""
    return [decl.name for decl in declarations(unit)]


def struct_members(unit: SourceUnit, name: str) -> list[Member]:
    """
    Return the named fields of every struct declaration called *name*.

    Embedded fields are skipped.  A field declaration listing several names
    (``A, B int``) yields one member per name, all sharing the same span.
    """
    result: list[Member] = []
    for decl in declarations(unit):
        if decl.name != name or not decl.is_struct:
            continue
        field_list = next(
            (c for c in decl.type_node.named_children
             if c.type == "field_declaration_list"),
            None,
        )
        if field_list is None:
            continue
        for field_node in field_list.named_children:
            if field_node.type != "field_declaration":
                continue
            type_node = field_node.child_by_field_name("type")
            if type_node is None:
                continue
            for name_node in field_node.children_by_field_name("name"):
                result.append(Member(
                    name=_text(name_node),
                    type_node=type_node,
                    start=type_node.start_byte,
                    end=type_node.end_byte,
                ))
    return result


def members(unit: SourceUnit, name: str) -> dict[str, Member]:
    """Map field name to :class:`Member` for struct declarations named *name*.

    A name that is not declared as a struct yields an empty mapping.
    """
    return {m.name: m for m in struct_members(unit, name)}


# ---------------------------------------------------------------------------
# Imports
# ---------------------------------------------------------------------------

def import_declarations(root) -> list:
    """Top-level ``import`` declaration nodes, in file order."""
    return [n for n in root.named_children if n.type == "import_declaration"]


def import_spec_nodes(decl_node) -> list:
    """The import_spec nodes of one import declaration."""
    specs: list = []
    for child in decl_node.named_children:
        if child.type == "import_spec":
            specs.append(child)
        elif child.type == "import_spec_list":
            specs.extend(
                s for s in child.named_children if s.type == "import_spec"
            )
    return specs


def import_entry(spec_node) -> ImportEntry:
    """Build an :class:`ImportEntry` from an import_spec node."""
    path = _unquote(_text(spec_node.child_by_field_name("path")))
    name_node = spec_node.child_by_field_name("name")
    if name_node is not None:
        return ImportEntry(alias=_text(name_node), path=path, explicit=True)
    return ImportEntry(alias=path.rsplit("/", 1)[-1], path=path)


def import_entries(root) -> list[ImportEntry]:
    """All import specs in the file, in source order."""
    return [
        import_entry(spec)
        for decl in import_declarations(root)
        for spec in import_spec_nodes(decl)
    ]


def first_non_import_declaration(root) -> Optional[object]:
    """The first top-level declaration that is not an import, or None."""
    for node in root.named_children:
        if node.type in _NON_IMPORT_DECLS:
            return node
    return None


def leading_comment_start(node) -> int:
    """Start offset of *node* including a doc comment directly above it.

    Only comments on consecutive lines ending right above the node count,
    and each must start its own line: a trailing comment on the package
    clause stays where it is.
    """
    start = node.start_byte
    row = node.start_point[0]
    prev = node.prev_named_sibling
    while (
        prev is not None
        and prev.type == "comment"
        and prev.end_point[0] == row - 1
        and _starts_line(prev)
    ):
        start = prev.start_byte
        row = prev.start_point[0]
        prev = prev.prev_named_sibling
    return start
