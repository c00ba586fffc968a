"""Errors raised while reading or writing flow files.

All of them derive from FlowError so callers can catch the whole family at
once. The concrete classes also derive from the matching builtin (OSError or
ValueError) so generic handlers keep working.
"""


class FlowError(Exception):
    """Base class for flow file errors.

    Attributes:
        path: Path of the file being read or written, or None.
    """

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class FlowIOError(FlowError, OSError):
    """The path does not exist or cannot be opened."""


class MalformedHeader(FlowError, ValueError):
    """The tag or the dimensions could not be read in full."""


class UnknownFormat(FlowError, ValueError):
    """The 4-byte tag matches none of the known flow formats."""


class InvalidDimensions(FlowError, ValueError):
    """Width or height is not a positive integer."""


class TruncatedData(FlowError, ValueError):
    """The sample payload is shorter than the header declares."""
