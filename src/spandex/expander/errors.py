"""Exception hierarchy shared by all expander backends.

IO failures are not wrapped: ``OSError`` and its subclasses propagate
unchanged from the filesystem calls that raised them.
"""


class ExpanderError(Exception):
    """Base class for all expander errors."""


class NotFoundError(ExpanderError):
    """A named backend or a referenced snippet does not exist."""


class AlreadyRegisteredError(ExpanderError):
    """A backend name was registered twice."""


class ParseError(ExpanderError):
    """A settings document or sidecar file could not be decoded."""


class InvalidNameError(ParseError):
    """A group or snippet name cannot be mapped to a file name."""


class UnsupportedOperationError(ExpanderError):
    """The backend does not implement the requested operation."""
