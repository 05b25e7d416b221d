"""
Diff display — unified diffs of pending file changes for ``--diff``.
"""

from __future__ import annotations

import difflib


def compute_diff(filepath: str, old_content: bytes, new_content: bytes) -> str | None:
    """Return a unified diff string, or None if the content is unchanged."""
    if old_content == new_content:
        return None

    old_lines = old_content.decode("utf-8", errors="replace").splitlines(keepends=True)
    new_lines = new_content.decode("utf-8", errors="replace").splitlines(keepends=True)

    diff = difflib.unified_diff(
        old_lines, new_lines,
        fromfile=f"a/{filepath}",
        tofile=f"b/{filepath}",
        lineterm="",
    )
    diff_text = "\n".join(line.rstrip("\n") for line in diff)
    return diff_text if diff_text.strip() else None


# Line prefix -> ANSI style; file headers are checked before +/- lines.
_STYLES = (
    ("+++ ", "\033[1m"),
    ("--- ", "\033[1m"),
    ("@@", "\033[36m"),
    ("+", "\033[32m"),
    ("-", "\033[31m"),
)
_RESET = "\033[0m"


def _style_line(line: str) -> str:
    for prefix, style in _STYLES:
        if line.startswith(prefix):
            return f"{style}{line}{_RESET}"
    return line


def format_colored_diff(diff_text: str) -> str:
    """Colour a diff from :func:`compute_diff` for terminal output."""
    return "\n".join(_style_line(line) for line in diff_text.splitlines())
