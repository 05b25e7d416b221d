"""
Splice engine — applies byte-range replacements to a source unit's buffer
and writes the result back to disk.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from typing import Iterable, Union

from ..parser import SourceUnit

logger = logging.getLogger(__name__)


class OverlappingEditsError(ValueError):
    """Raised when two edits in one batch touch the same bytes."""


@dataclass(frozen=True)
class Edit:
    """Replace original-buffer bytes ``[start, end)`` with *text*."""
    start: int
    end: int
    text: Union[str, bytes]

    @property
    def data(self) -> bytes:
        if isinstance(self.text, bytes):
            return self.text
        return self.text.encode("utf-8")


def apply_edits(unit: SourceUnit, edits: Iterable[Edit]) -> SourceUnit:
    """Apply *edits* to ``unit.buffer`` in a single coordinated pass.

    Spans are in original-buffer coordinates and must not overlap.  They are
    first translated through any splices already applied to the unit, then
    applied right to left (descending start offset) so that a replacement
    whose length differs from its span never shifts an edit still pending.

    Returns the same unit, mutated in place.
    """
    # Sort edits by start DESCENDING; ties (zero-width inserts) keep order
    ordered = sorted(edits, key=lambda e: (e.start, e.end), reverse=True)
    if not ordered:
        return unit

    for right, left in zip(ordered, ordered[1:]):
        if left.end > right.start:
            raise OverlappingEditsError(
                f"edits [{left.start}, {left.end}) and "
                f"[{right.start}, {right.end}) overlap"
            )

    # Translate every span before touching the buffer.
    located = [(unit.locate(e.start, e.end), e.data) for e in ordered]
    for (start, end), data in located:
        unit.splice(start, end, data)

    logger.debug(
        "Applied %d edit(s) to %s", len(located), unit.path or "<source>",
    )
    return unit


def insert(unit: SourceUnit, offset: int, text: str) -> None:
    """Insert *text* at a current-buffer *offset*."""
    unit.splice(offset, offset, text.encode("utf-8"))


def replace_current(unit: SourceUnit, start: int, end: int, text: str) -> None:
    """Replace current-buffer bytes ``[start, end)`` with *text*."""
    unit.splice(start, end, text.encode("utf-8"))


def safe_write(file_path: str, data: bytes) -> None:
    """Overwrite *file_path* with *data* via temp file + rename."""
    abs_path = os.path.abspath(file_path)
    tmp_path = abs_path + ".editstruct_tmp"

    try:
        with open(tmp_path, "wb") as f:
            f.write(data)
        if os.path.exists(abs_path):
            shutil.copymode(abs_path, tmp_path)
        os.replace(tmp_path, abs_path)
    except Exception:
        # Clean up temp file on failure
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
