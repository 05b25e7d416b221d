"""
`editstruct` command-line entry point.

Applies the struct field types listed in the edit configuration to every
Go file in a directory::

    editstruct                          -- edit.yaml, current directory
    editstruct --config types.yaml      -- explicit configuration file
    editstruct --dir ./models -r        -- walk a directory tree
    editstruct --dry-run --diff         -- show changes, write nothing

Exit status is 0 on success (including "nothing to change") and 1 when the
configuration cannot be loaded or any file fails to read, parse or edit.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

from .config import Settings, TypeConfig, load
from .diff_display import compute_diff, format_colored_diff
from .discovery import find_go_files
from .editing.editor import Editor
from .errors import EditStructError, ReadFailure

logger = logging.getLogger(__name__)


@dataclass
class FileResult:
    """Outcome of processing one file."""
    path: str
    modified: bool
    before: bytes = b""
    after: bytes = b""


# ---------------------------------------------------------------------------
# Per-file orchestration
# ---------------------------------------------------------------------------

def process_file(
    path: str,
    configs: Sequence[TypeConfig],
    dry_run: bool = False,
) -> FileResult:
    """
    Apply *configs* to the Go file at *path*.

    Structs are matched by name; a later config for the same type replaces
    an earlier one.  Imports are added only for qualified types actually
    written to this file.  The file is rewritten only when something changed
    and *dry_run* is False.

    Raises
    ------
    EditStructError
        If the file cannot be read, parsed or have its imports updated.
    """
    ed = Editor.parse_file(path)
    before = ed.source()

    by_type = {c.type: c for c in configs}
    modified = False
    for name in ed.struct_names():
        tc = by_type.get(name)
        if tc is None:
            continue
        if ed.edit_struct(name, tc.fields):
            modified = True

    if not modified:
        logger.debug("%s: nothing to change", path)
        return FileResult(path=path, modified=False, before=before, after=before)

    applied = ed.apply()
    ed.add_imports(ed.written_imports())
    after = ed.source()

    if not dry_run:
        ed.write_to(path)
    logger.info(
        "%s: %d field(s) %s", path, applied,
        "would change" if dry_run else "updated",
    )
    return FileResult(path=path, modified=True, before=before, after=after)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="editstruct",
        description="Rewrite Go struct field types in place, preserving formatting",
    )
    parser.add_argument("--config", default=None,
                        help="Path to the edit configuration (default: edit.yaml)")
    parser.add_argument("--dir", dest="directory", default=None,
                        help="Directory containing Go files (default: .)")
    parser.add_argument("-r", "--recursive", action="store_true", default=None,
                        help="Also process Go files in subdirectories")
    parser.add_argument("--dry-run", action="store_true",
                        help="Compute changes without writing files")
    parser.add_argument("--diff", action="store_true",
                        help="Print a unified diff for every changed file")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log progress and skipped edits")
    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """
    Run editstruct.

    Parameters
    ----------
    argv:
        Argument list without the program name.  Defaults to sys.argv.

    Returns
    -------
    int
        Process exit status.
    """
    args = _build_parser().parse_args(argv)
    settings = Settings(
        config=args.config,
        directory=args.directory,
        recursive=args.recursive,
        log_level="DEBUG" if args.verbose else None,
    )

    # Configure logging if not already configured
    if not logging.root.handlers:
        logging.basicConfig(
            level=getattr(logging, settings.LOG_LEVEL, logging.WARNING),
            format="%(levelname)s  %(name)s  %(message)s",
        )

    try:
        configs = load(settings.CONFIG_PATH)
    except ReadFailure as exc:
        if isinstance(exc.__cause__, FileNotFoundError):
            print(f"config file not found: {settings.CONFIG_PATH}", file=sys.stderr)
        else:
            print(f"load config: {exc}", file=sys.stderr)
        return 1
    except EditStructError as exc:
        print(f"load config: {exc}", file=sys.stderr)
        return 1

    if not configs:
        logger.info("No type configurations in %s", settings.CONFIG_PATH)
        return 0

    try:
        files = find_go_files(settings.DIRECTORY, recursive=settings.RECURSIVE)
    except OSError as exc:
        print(f"find go files: {exc}", file=sys.stderr)
        return 1

    for path in files:
        try:
            result = process_file(path, configs, dry_run=args.dry_run)
        except (EditStructError, OSError) as exc:
            print(f"process {path}: {exc}", file=sys.stderr)
            return 1
        if args.diff and result.modified:
            diff_text = compute_diff(path, result.before, result.after)
            if diff_text:
                if sys.stdout.isatty():
                    diff_text = format_colored_diff(diff_text)
                print(diff_text)

    return 0


def run() -> None:
    """Console-script wrapper around :func:`main`."""
    sys.exit(main())


if __name__ == "__main__":
    run()
