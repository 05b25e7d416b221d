"""
Import synthesizer — adds missing import specs to a Go source unit.

The existing import layout is one of a small closed set of shapes, each with
its own renderer:

* :class:`Absent`: no import declaration; a new block is inserted before
  the first non-import top-level declaration (or at end of file).
* :class:`Single`: ``import "fmt"``; the declaration is rewritten as a
  block holding the original spec plus the new ones.
* :class:`Block`: ``import ( ... )``; the parenthesized region is rewritten
  with the original specs followed by the new ones.

Import declarations are relocated in the *current* buffer with one fresh
parse per call, so member edits applied earlier never leave stale offsets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Union

from ..errors import SynthesisFailure
from ..parser import (
    ImportEntry,
    SourceUnit,
    first_non_import_declaration,
    import_declarations,
    import_entries,
    import_entry,
    import_spec_nodes,
    leading_comment_start,
    parse_tree,
)
from .splice import insert, replace_current

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Layout variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Absent:
    """No import declaration; new block goes at *insert_at*."""
    insert_at: int
    at_eof: bool = False


@dataclass(frozen=True)
class Single:
    """A non-parenthesized import declaration spanning ``[start, end)``."""
    start: int
    end: int
    entries: list[ImportEntry] = field(default_factory=list)


@dataclass(frozen=True)
class Block:
    """A parenthesized import declaration; offsets of ``(`` and ``)``."""
    lparen: int
    rparen: int
    entries: list[ImportEntry] = field(default_factory=list)


ImportLayout = Union[Absent, Single, Block]


def render_entry(entry: ImportEntry) -> str:
    """Render one import spec: ``"path"`` or ``alias "path"``."""
    if entry.explicit:
        return f'{entry.alias} "{entry.path}"'
    return f'"{entry.path}"'


def existing_aliases(entries) -> dict[str, str]:
    """Map alias to path for *entries*; later specs win on duplicates."""
    return {entry.alias: entry.path for entry in entries}


def locate(buffer: bytes) -> tuple[ImportLayout, list[ImportEntry]]:
    """Classify the import layout of *buffer*.

    Returns the layout of the first import declaration together with the
    entries of all import declarations.
    """
    root = parse_tree(buffer).root_node
    entries = import_entries(root)
    decls = import_declarations(root)

    if not decls:
        anchor = first_non_import_declaration(root)
        if anchor is None:
            return Absent(insert_at=len(buffer), at_eof=True), entries
        return Absent(insert_at=leading_comment_start(anchor)), entries

    decl = decls[0]
    spec_list = next(
        (c for c in decl.named_children if c.type == "import_spec_list"),
        None,
    )
    own = [import_entry(s) for s in import_spec_nodes(decl)]
    if spec_list is None:
        return Single(start=decl.start_byte, end=decl.end_byte, entries=own), entries

    lparen = rparen = None
    for child in spec_list.children:
        if child.type == "(" and lparen is None:
            lparen = child.start_byte
        elif child.type == ")":
            rparen = child.start_byte
    if lparen is None or rparen is None:
        raise SynthesisFailure("import block has no delimiters")
    return Block(lparen=lparen, rparen=rparen, entries=own), entries


# ---------------------------------------------------------------------------
# Renderers, one per variant
# ---------------------------------------------------------------------------

def _block_lines(entries) -> str:
    return "\n".join("\t" + render_entry(e) for e in entries)


def _render_absent(unit: SourceUnit, layout: Absent, delta) -> None:
    block = f"import (\n{_block_lines(delta)}\n)\n"
    if layout.at_eof:
        lead = "\n" if unit.buffer.endswith(b"\n") else "\n\n"
        insert(unit, layout.insert_at, lead + block)
    else:
        insert(unit, layout.insert_at, block + "\n")


def _render_single(unit: SourceUnit, layout: Single, delta) -> None:
    text = f"import (\n{_block_lines(list(layout.entries) + delta)}\n)"
    replace_current(unit, layout.start, layout.end, text)


def _render_block(unit: SourceUnit, layout: Block, delta) -> None:
    text = f"(\n{_block_lines(list(layout.entries) + delta)}\n)"
    replace_current(unit, layout.lparen, layout.rparen + 1, text)


_RENDERERS = {
    Absent: _render_absent,
    Single: _render_single,
    Block: _render_block,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def add_imports(unit: SourceUnit, required: Mapping[str, str]) -> SourceUnit:
    """Add the imports in *required* (alias -> path) that are not yet bound.

    An alias that is already bound, even to a different path, counts as
    satisfied.  New specs are appended sorted by alias so that output is
    reproducible across runs; a spec is written with its alias only when
    the alias differs from the last path segment.

    Raises
    ------
    SynthesisFailure
        If the unit had import specs when parsed but no import declaration
        can be found in the current buffer.
    """
    if not required:
        return unit

    layout, current = locate(bytes(unit.buffer))
    bound = existing_aliases(current)
    bound.update(existing_aliases(unit.imports))

    delta = [
        ImportEntry(
            alias=alias,
            path=path,
            explicit=alias != path.rsplit("/", 1)[-1],
        )
        for alias, path in sorted(required.items())
        if alias not in bound
    ]
    if not delta:
        logger.debug("All %d import(s) already present", len(required))
        return unit

    if isinstance(layout, Absent) and unit.imports:
        raise SynthesisFailure(
            f"no import declaration found in {unit.path or '<source>'}"
        )

    _RENDERERS[type(layout)](unit, layout, delta)
    unit.imports.extend(delta)
    logger.debug(
        "Added import(s) %s to %s (%s layout)",
        ", ".join(e.path for e in delta),
        unit.path or "<source>",
        type(layout).__name__.lower(),
    )
    return unit
