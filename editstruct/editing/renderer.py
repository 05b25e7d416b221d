"""
Type-text renderer — canonical text for Go type expressions, plus the
helpers that infer which imports a configured type string needs.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional


def _text(node) -> str:
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def render(node) -> str:
    """Render a type-expression node back to canonical Go syntax.

    Handles identifiers, qualified identifiers, pointers, slices and maps,
    recursively.  Any other form renders as an empty string.  Only token
    text is used, so whitespace inside the original expression does not
    affect the result (``map[ string ]int`` renders as ``map[string]int``).
    """
    if node is None:
        return ""
    kind = node.type
    if kind == "type_identifier":
        return _text(node)
    if kind == "qualified_type":
        package = node.child_by_field_name("package")
        name = node.child_by_field_name("name")
        return f"{_text(package)}.{_text(name)}"
    if kind == "pointer_type":
        inner = node.named_children[-1] if node.named_children else None
        return "*" + render(inner)
    if kind == "slice_type":
        return "[]" + render(node.child_by_field_name("element"))
    if kind == "map_type":
        key = render(node.child_by_field_name("key"))
        value = render(node.child_by_field_name("value"))
        return f"map[{key}]{value}"
    return ""


def parse_type_string(type_str: str) -> tuple[str, str, bool]:
    """Split a configured type into ``(package, type_name, is_pointer)``.

    ``"*time.Time"`` gives ``("time", "Time", True)``; unqualified types
    have an empty package.
    """
    type_str = type_str.strip()
    is_pointer = type_str.startswith("*")
    if is_pointer:
        type_str = type_str[1:]
    package, sep, name = type_str.partition(".")
    if sep:
        return package, name, is_pointer
    return "", type_str, is_pointer


# A package qualifier: an identifier directly followed by ".Name", not itself
# preceded by an identifier character or a dot.
_QUALIFIER_RE = re.compile(r"(?<![\w.])([A-Za-z_]\w*)\.[A-Za-z_]")


def qualified_imports(type_str: str) -> list[tuple[str, str]]:
    """Return ``(alias, path)`` for every package qualifier in *type_str*.

    Composite types are searched too, so ``map[uuid.UUID][]time.Time``
    needs both ``uuid`` and ``time``.  The qualifier is used as both alias
    and import path.
    """
    return [(q, q) for q in _QUALIFIER_RE.findall(type_str)]


def qualified_import(type_str: str) -> Optional[tuple[str, str]]:
    """Return ``(alias, path)`` for the first qualified type, or None.

    ``*time.Time`` and ``[]time.Time`` both give ``("time", "time")``.
    """
    found = qualified_imports(type_str)
    return found[0] if found else None


def required_imports(type_strs: Iterable[str]) -> dict[str, str]:
    """Map alias to path for every qualified type in *type_strs*."""
    imports: dict[str, str] = {}
    for type_str in type_strs:
        for alias, path in qualified_imports(type_str):
            imports[alias] = path
    return imports
