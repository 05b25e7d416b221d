"""
editstruct — format-preserving Go struct field type editor.

Public API for library usage::

    from editstruct import Editor

    ed = Editor.parse_file("types.go")
    if ed.edit_struct("Example", {"CreatedAt": "time.Time"}):
        ed.apply()
        ed.add_imports(ed.written_imports())
        ed.write_to("types.go")
"""

from .config import TypeConfig, load
from .editing import Editor
from .errors import (
    ConfigError,
    EditConflict,
    EditStructError,
    ParseFailure,
    ReadFailure,
    SynthesisFailure,
)

__all__ = [
    "Editor", "TypeConfig", "load",
    "EditStructError", "ReadFailure", "ParseFailure",
    "ConfigError", "SynthesisFailure", "EditConflict",
]
