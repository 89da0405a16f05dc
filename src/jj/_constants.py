"""Tunables shared by the engine and the rendering pipeline."""

from typing import Final, NamedTuple

MAX_NESTING_DEPTH: Final[int] = 512
"""Deepest container nesting the scanner will follow before giving up."""

MAX_ARRAY_PADDING: Final[int] = 1_000_000
"""Most nulls a write may insert to reach an array index past the end."""

INDENT: Final[bytes] = b"  "
"""Indent unit used by pretty output."""

KEY_SEPARATOR: Final[bytes] = b": "
"""Separator between a key and its value in pretty output."""

WHITESPACE: Final[frozenset[int]] = frozenset(b" \t\r\n")
"""Insignificant JSON whitespace bytes."""

APPEND_KEY: Final[str] = "-1"
"""Path segment that appends to an array on write."""

COUNT_KEY: Final[str] = "#"
"""Path segment that counts (or maps over) array elements on read."""


class Style(NamedTuple):
    """ANSI start/end sequences per token class."""

    key: tuple[str, str]
    string: tuple[str, str]
    number: tuple[str, str]
    true: tuple[str, str]
    false: tuple[str, str]
    null: tuple[str, str]
    punctuation: tuple[str, str]


_RESET = "\x1b[0m"

TERMINAL_STYLE: Final[Style] = Style(
    key=("\x1b[1m\x1b[94m", _RESET),
    string=("\x1b[32m", _RESET),
    number=("\x1b[33m", _RESET),
    true=("\x1b[36m", _RESET),
    false=("\x1b[36m", _RESET),
    null=("\x1b[2m", _RESET),
    punctuation=("\x1b[1m", _RESET),
)
"""Default color table for interactive terminals."""
