"""
Exception hierarchy for editstruct.

Every failure that aborts the processing of a file derives from
:class:`EditStructError` so the CLI can report it uniformly.  "Nothing to
do" situations (unknown type, unknown field, identical type) are not errors
and never raise.
"""


class EditStructError(Exception):
    """Base class for all editstruct failures."""


class ReadFailure(EditStructError):
    """Raised when a source or configuration file cannot be read."""


class ParseFailure(EditStructError):
    """Raised when a source file is not valid Go."""


class ConfigError(EditStructError):
    """Raised when the edit configuration cannot be decoded."""


class SynthesisFailure(EditStructError):
    """Raised when known import declarations cannot be relocated in the buffer."""


class EditConflict(EditStructError):
    """Raised when a field whose type was already replaced is edited again."""
