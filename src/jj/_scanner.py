"""Byte-level JSON scanning.

These helpers find value boundaries inside a buffer without building a parse
tree. Positions are plain integer offsets; spans are half-open ``(start, end)``
tuples. The scanner is strict about structure (balanced brackets, terminated
strings, spelled-out literals) but does not validate number grammar or string
escapes in depth, which is left to the standard json decoder where it matters.
"""

from typing import TYPE_CHECKING, Final, NamedTuple

from ._constants import MAX_NESTING_DEPTH, WHITESPACE
from ._exceptions import MalformedValueError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ._types import Buffer, Span

__all__ = [
    "Token",
    "document_span",
    "find_string_end",
    "iter_elements",
    "iter_members",
    "skip_whitespace",
    "string_end",
    "tokenize",
    "value_end",
]

QUOTE: Final[int] = ord('"')
BACKSLASH: Final[int] = ord("\\")
COLON: Final[int] = ord(":")
COMMA: Final[int] = ord(",")
LBRACE: Final[int] = ord("{")
RBRACE: Final[int] = ord("}")
LBRACKET: Final[int] = ord("[")
RBRACKET: Final[int] = ord("]")

_CLOSERS: Final[dict[int, int]] = {LBRACE: RBRACE, LBRACKET: RBRACKET}
_DELIMITERS: Final[frozenset[int]] = WHITESPACE | frozenset(b",:]}[{\"")
_NUMBER_BYTES: Final[frozenset[int]] = frozenset(b"0123456789+-.eE")
_NUMBER_START: Final[frozenset[int]] = frozenset(b"-0123456789")
_LITERALS: Final[dict[int, bytes]] = {
    ord("t"): b"true",
    ord("f"): b"false",
    ord("n"): b"null",
}
_PUNCTUATION: Final[dict[int, str]] = {
    LBRACE: "{",
    RBRACE: "}",
    LBRACKET: "[",
    RBRACKET: "]",
    COLON: ":",
    COMMA: ",",
}


def _malformed(what: str, pos: int) -> MalformedValueError:
    return MalformedValueError(f"malformed JSON: {what} at offset {pos}")


def skip_whitespace(buf: "Buffer", pos: int) -> int:
    """Return the first offset at or after pos that is not JSON whitespace."""
    n = len(buf)
    while pos < n and buf[pos] in WHITESPACE:
        pos += 1
    return pos


def find_string_end(buf: "Buffer", pos: int) -> int:
    """Return the offset just past the string opening at pos, or -1.

    Args:
        buf: The buffer to scan.
        pos: Offset of the opening quote.

    Returns:
        The offset after the closing quote, or -1 if the string is
        unterminated.
    """
    i = pos + 1
    while True:
        quote = buf.find(b'"', i)
        if quote < 0:
            return -1
        # A quote is escaped only by an odd run of backslashes.
        back = quote - 1
        while buf[back] == BACKSLASH:
            back -= 1
        if (quote - 1 - back) % 2 == 0:
            return quote + 1
        i = quote + 1


def string_end(buf: "Buffer", pos: int) -> int:
    """Like find_string_end, but raise on an unterminated string.

    Raises:
        MalformedValueError: If the string has no closing quote.
    """
    end = find_string_end(buf, pos)
    if end < 0:
        raise _malformed("unterminated string", pos)
    return end


def _scalar_end(buf: "Buffer", pos: int) -> int:
    n = len(buf)
    end = pos
    while end < n and buf[end] not in _DELIMITERS:
        end += 1
    first = buf[pos]
    literal = _LITERALS.get(first)
    if literal is not None:
        if buf[pos:end] != literal:
            raise _malformed("invalid literal", pos)
        return end
    if first in _NUMBER_START and all(b in _NUMBER_BYTES for b in buf[pos:end]):
        return end
    raise _malformed("unexpected character", pos)


def _container_end(buf: "Buffer", pos: int, max_depth: int) -> int:
    n = len(buf)
    expected = [_CLOSERS[buf[pos]]]
    i = pos + 1
    while i < n:
        c = buf[i]
        if c == QUOTE:
            i = string_end(buf, i)
            continue
        closer = _CLOSERS.get(c)
        if closer is not None:
            expected.append(closer)
            if len(expected) > max_depth:
                msg = f"nesting depth exceeds maximum {max_depth}"
                raise MalformedValueError(msg)
        elif c in (RBRACE, RBRACKET):
            if c != expected.pop():
                raise _malformed("mismatched bracket", i)
            if not expected:
                return i + 1
        i += 1
    raise _malformed("unterminated container", pos)


def value_end(buf: "Buffer", pos: int, *, max_depth: int = MAX_NESTING_DEPTH) -> int:
    """Return the offset just past the JSON value starting at pos.

    Args:
        buf: The buffer to scan.
        pos: Offset of the first byte of the value (no leading whitespace).
        max_depth: Maximum container nesting to follow.

    Returns:
        The end offset of the value.

    Raises:
        MalformedValueError: If no complete value starts at pos.
    """
    if pos >= len(buf):
        raise _malformed("unexpected end of input", pos)
    first = buf[pos]
    if first == QUOTE:
        return string_end(buf, pos)
    if first in _CLOSERS:
        return _container_end(buf, pos, max_depth)
    return _scalar_end(buf, pos)


def document_span(
    buf: "Buffer", *, max_depth: int = MAX_NESTING_DEPTH
) -> "Span | None":
    """Return the span of the top-level value, or None for a blank buffer.

    Bytes after the first complete value are ignored.
    """
    start = skip_whitespace(buf, 0)
    if start == len(buf):
        return None
    return start, value_end(buf, start, max_depth=max_depth)


def iter_members(
    buf: "Buffer", start: int, end: int, *, max_depth: int = MAX_NESTING_DEPTH
) -> "Iterator[tuple[Span, Span]]":
    """Yield ``(key_span, value_span)`` for each member of an object.

    Args:
        buf: The buffer holding the object.
        start: Offset of the opening brace.
        end: Offset just past the closing brace.
        max_depth: Maximum container nesting to follow.

    Yields:
        The span of the quoted key and the span of its value, in document
        order.

    Raises:
        MalformedValueError: If the object body is malformed.
    """
    last = end - 1
    pos = skip_whitespace(buf, start + 1)
    if pos == last:
        return
    while True:
        if buf[pos] != QUOTE:
            raise _malformed("expected object key", pos)
        key_end = string_end(buf, pos)
        colon = skip_whitespace(buf, key_end)
        if colon >= last or buf[colon] != COLON:
            raise _malformed("expected ':'", colon)
        value_start = skip_whitespace(buf, colon + 1)
        if value_start >= last:
            raise _malformed("expected value", value_start)
        value_stop = value_end(buf, value_start, max_depth=max_depth)
        yield (pos, key_end), (value_start, value_stop)
        pos = skip_whitespace(buf, value_stop)
        if pos == last:
            return
        if buf[pos] != COMMA:
            raise _malformed("expected ',' or '}'", pos)
        pos = skip_whitespace(buf, pos + 1)


def iter_elements(
    buf: "Buffer", start: int, end: int, *, max_depth: int = MAX_NESTING_DEPTH
) -> "Iterator[Span]":
    """Yield the span of each element of an array in document order.

    Args:
        buf: The buffer holding the array.
        start: Offset of the opening bracket.
        end: Offset just past the closing bracket.
        max_depth: Maximum container nesting to follow.

    Raises:
        MalformedValueError: If the array body is malformed.
    """
    last = end - 1
    pos = skip_whitespace(buf, start + 1)
    if pos == last:
        return
    while True:
        if pos >= last:
            raise _malformed("expected value", pos)
        value_stop = value_end(buf, pos, max_depth=max_depth)
        yield pos, value_stop
        pos = skip_whitespace(buf, value_stop)
        if pos == last:
            return
        if buf[pos] != COMMA:
            raise _malformed("expected ',' or ']'", pos)
        pos = skip_whitespace(buf, pos + 1)


class Token(NamedTuple):
    """A lexical token of a JSON text."""

    kind: str
    start: int
    end: int


def tokenize(buf: "Buffer") -> "Iterator[Token]":
    """Split a JSON text into tokens, skipping whitespace.

    Token kinds are the punctuation characters themselves (``{ } [ ] : ,``),
    ``string``, ``number``, ``true``, ``false``, ``null`` and ``other`` for
    anything unrecognized. Tokenizing never fails: an unterminated string runs
    to the end of the buffer.
    """
    n = len(buf)
    pos = skip_whitespace(buf, 0)
    while pos < n:
        c = buf[pos]
        punct = _PUNCTUATION.get(c)
        if punct is not None:
            yield Token(punct, pos, pos + 1)
            end = pos + 1
        elif c == QUOTE:
            end = find_string_end(buf, pos)
            if end < 0:
                end = n
            yield Token("string", pos, end)
        else:
            end = pos + 1
            while end < n and buf[end] not in _DELIMITERS:
                end += 1
            word = bytes(buf[pos:end])
            if word in (b"true", b"false", b"null"):
                kind = word.decode()
            elif c in _NUMBER_START:
                kind = "number"
            else:
                kind = "other"
            yield Token(kind, pos, end)
        pos = skip_whitespace(buf, end)
