"""Key path parsing.

A key path is a dot-separated list of segments such as ``name.last`` or
``friends.1.first``. A backslash escapes the next character, so ``a\\.b`` is
the single key ``a.b``. Whether a segment addresses an object member or an
array element is decided while walking the document, not here.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ._constants import APPEND_KEY, COUNT_KEY
from ._exceptions import PathParseError

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = ["KeyPath", "Step", "coerce_path", "format_path", "parse_path"]


@dataclass(frozen=True, slots=True)
class Step:
    """One segment of a key path.

    Attributes:
        key: The unescaped segment text.
    """

    key: str

    @property
    def index(self) -> int | None:
        """The array index this step denotes, or None if it is not numeric."""
        if self.key.isascii() and self.key.isdigit():
            return int(self.key)
        return None

    @property
    def is_append(self) -> bool:
        """Whether this step appends to an array when writing."""
        return self.key == APPEND_KEY

    @property
    def is_count(self) -> bool:
        """Whether this step is the ``#`` array modifier."""
        return self.key == COUNT_KEY


KeyPath = tuple[Step, ...]


def _check_encodable(text: str, path: str) -> None:
    try:
        _ = text.encode("utf-8")
    except UnicodeEncodeError as e:
        msg = f"path {path!r} is not valid UTF-8 text: {e.reason}"
        raise PathParseError(msg) from e


def parse_path(path: str) -> KeyPath:
    """Split a key path into steps.

    Args:
        path: The key path. The empty string selects the whole document.

    Returns:
        The steps in order.

    Raises:
        PathParseError: If the path ends with a lone escape character or
            holds a lone surrogate.
    """
    if not path:
        return ()
    _check_encodable(path, path)
    steps: list[Step] = []
    segment: list[str] = []
    chars = iter(path)
    for char in chars:
        if char == "\\":
            escaped = next(chars, None)
            if escaped is None:
                msg = f"malformed escape at end of path {path!r}"
                raise PathParseError(msg)
            segment.append(escaped)
        elif char == ".":
            steps.append(Step("".join(segment)))
            segment = []
        else:
            segment.append(char)
    steps.append(Step("".join(segment)))
    return tuple(steps)


def format_path(steps: "Sequence[Step]") -> str:
    """Join steps back into a key path, escaping as needed.

    A path made of the single empty key formats as ``""``, which parses back
    as the whole document. Pass ``(Step(""),)`` directly to address it.
    """
    return ".".join(
        step.key.replace("\\", "\\\\").replace(".", "\\.") for step in steps
    )


def coerce_path(path: "str | Sequence[Step]") -> KeyPath:
    """Accept either a key path string or already-parsed steps.

    Raises:
        PathParseError: If the path is malformed or a key is not UTF-8 text.
    """
    if isinstance(path, str):
        return parse_path(path)
    steps = tuple(path)
    for step in steps:
        _check_encodable(step.key, format_path(steps))
    return steps
