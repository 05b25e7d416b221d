"""
File discovery — lists the Go source files a run should consider.

Test files (``*_test.go``) are never returned.  Flat mode looks only at
the given directory; recursive mode walks it, pruning vendored code,
test fixtures and hidden directories.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)

_SKIP_DIRS: frozenset[str] = frozenset({
    "vendor",
    "testdata",
    "node_modules",
})


def _is_candidate(name: str) -> bool:
    return name.endswith(".go") and not name.endswith("_test.go")


def find_go_files(directory: str = ".", recursive: bool = False) -> list[str]:
    """
    Return sorted paths of non-test Go files under *directory*.

    Parameters
    ----------
    directory:
        Directory to search.  Returned paths are joined onto it.
    recursive:
        Descend into subdirectories when True.
    """
    if not recursive:
        results = [
            os.path.join(directory, entry.name)
            for entry in os.scandir(directory)
            if entry.is_file() and _is_candidate(entry.name)
        ]
        return sorted(results)

    results = []
    for dirpath, dirnames, filenames in os.walk(directory, topdown=True):
        # Prune excluded directories in-place (modifies the walk)
        dirnames[:] = sorted(
            d for d in dirnames
            if d not in _SKIP_DIRS and not d.startswith((".", "_"))
        )
        for fname in filenames:
            if _is_candidate(fname):
                results.append(os.path.join(dirpath, fname))

    logger.debug("Found %d Go file(s) under %s", len(results), directory)
    return sorted(results)
