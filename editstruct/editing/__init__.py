"""Format-preserving struct edits — splice engine, renderer and import synthesis."""

from .editor import Editor
from .imports import Absent, Block, Single, add_imports, locate
from .renderer import (
    parse_type_string,
    qualified_import,
    qualified_imports,
    render,
    required_imports,
)
from .splice import Edit, OverlappingEditsError, apply_edits

__all__ = [
    "Editor",
    "Edit", "OverlappingEditsError", "apply_edits",
    "Absent", "Single", "Block", "add_imports", "locate",
    "render", "parse_type_string", "qualified_import", "qualified_imports", "required_imports",
]
