"""Exception hierarchy for jj.

Every error the engine raises derives from JJError, so callers can catch the
whole family at once. I/O errors (OSError) are never wrapped.
"""

__all__ = [
    "JJError",
    "MalformedValueError",
    "NotFoundError",
    "PathParseError",
    "TypeConflictError",
]


class JJError(Exception):
    """Base class for all jj errors."""


class PathParseError(JJError):
    """A key path is malformed or cannot be used for the requested operation.

    Raised before the document is touched.
    """


class NotFoundError(JJError):
    """A key path does not resolve to a value.

    Queries report a miss by returning None; this error is raised by
    delete() and by get().
    """

    path: str

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"path not found: {path!r}")


class TypeConflictError(JJError):
    """A path step does not fit the shape of the document being written.

    For example, a key step against a JSON string, or a non-numeric step
    against an array.
    """


class MalformedValueError(JJError):
    """A value or document is not well-formed JSON."""
