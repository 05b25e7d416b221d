"""
Editor — format-preserving struct field type edits for one Go file.

Typical use::

    ed = Editor.parse_file("types.go")
    if ed.edit_struct("Example", {"Total": "uint64"}):
        ed.apply()
        ed.add_imports(ed.written_imports())
        ed.write_to("types.go")
"""

from __future__ import annotations

import logging
from typing import Mapping

from .. import parser
from ..errors import EditConflict
from ..parser import SourceUnit
from .imports import add_imports
from .renderer import render, required_imports
from .splice import Edit, apply_edits, safe_write

logger = logging.getLogger(__name__)


class Editor:
    """Queue and apply struct field edits against a :class:`SourceUnit`."""

    def __init__(self, unit: SourceUnit) -> None:
        self.unit = unit
        self._pending: dict[tuple[int, int], Edit] = {}
        self._written: list[str] = []
        self._applied: dict[tuple[int, int], str] = {}

    @classmethod
    def parse_file(cls, path: str) -> "Editor":
        """Read and parse *path*; raises ReadFailure / ParseFailure."""
        return cls(parser.parse_file(path))

    @classmethod
    def from_source(cls, source: bytes, path: str = "") -> "Editor":
        return cls(parser.parse(source, path))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def struct_names(self) -> list[str]:
        """Names of all top-level type declarations, in file order."""
        return parser.declaration_names(self.unit)

    def pending(self) -> int:
        return len(self._pending)

    def source(self) -> bytes:
        return self.unit.source()

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def edit_struct(self, struct_name: str, field_edits: Mapping[str, str]) -> bool:
        """Queue type replacements for the named fields of *struct_name*.

        Every struct declaration with that name is visited.  Unknown structs,
        unknown fields and fields whose type already renders as the requested
        text are skipped silently.  After :meth:`apply`, a field keeps the
        type text that was written to it.

        Returns True if at least one edit was queued.

        Raises
        ------
        EditConflict
            If a field whose type was already applied is asked for a
            different type.
        """
        modified = False
        for member in parser.struct_members(self.unit, struct_name):
            new_type = field_edits.get(member.name)
            if new_type is None:
                continue

            applied = self._applied.get(member.span)
            if applied is not None:
                if applied != new_type:
                    raise EditConflict(
                        f"edit {struct_name}.{member.name}: type already "
                        f"replaced with {applied}, cannot change it to {new_type}"
                    )
                logger.debug(
                    "%s.%s already has type %s", struct_name, member.name, new_type,
                )
                continue

            old_type = render(member.type_node)
            if old_type == new_type:
                logger.debug(
                    "%s.%s already has type %s", struct_name, member.name, new_type,
                )
                continue

            queued = self._pending.get(member.span)
            if queued is not None:
                # A, B int: the names share one type expression
                if queued.text != new_type:
                    logger.warning(
                        "%s.%s shares its type with another field; keeping %s, "
                        "ignoring %s",
                        struct_name, member.name, queued.text, new_type,
                    )
                continue

            self._pending[member.span] = Edit(member.start, member.end, new_type)
            self._written.append(new_type)
            logger.debug(
                "%s.%s: %s -> %s", struct_name, member.name, old_type, new_type,
            )
            modified = True
        return modified

    def apply(self) -> int:
        """Apply all queued edits to the buffer and clear the queue."""
        count = len(self._pending)
        apply_edits(self.unit, self._pending.values())
        for span, edit in self._pending.items():
            self._applied[span] = edit.text
        self._pending.clear()
        return count

    # ------------------------------------------------------------------
    # Imports
    # ------------------------------------------------------------------

    @staticmethod
    def required_imports(field_edits: Mapping[str, str]) -> dict[str, str]:
        """Imports needed by the qualified types among *field_edits*."""
        return required_imports(field_edits.values())

    def written_imports(self) -> dict[str, str]:
        """Imports needed by every type text queued or applied so far."""
        return required_imports(self._written)

    def add_imports(self, required: Mapping[str, str]) -> None:
        """Add the imports in *required* that the file does not bind yet."""
        add_imports(self.unit, required)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def write_to(self, path: str) -> None:
        """Overwrite *path* with the current buffer."""
        safe_write(path, self.unit.source())
