"""Value views over raw JSON bytes, and write-value type inference."""

import json
import math
import re
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Final

from ._exceptions import MalformedValueError
from ._scanner import (
    BACKSLASH,
    LBRACE,
    LBRACKET,
    QUOTE,
    iter_elements,
    iter_members,
)

if TYPE_CHECKING:
    from ._types import Buffer, JSONValue, Span

__all__ = [
    "Value",
    "ValueType",
    "WriteKind",
    "decode_json",
    "display_bytes",
    "encode_text",
    "infer_type",
    "infer_write_value",
]

_JSON_NUMBER: Final[re.Pattern[str]] = re.compile(
    r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?"
)
_LONE_SURROGATE: Final[re.Pattern[str]] = re.compile("[\ud800-\udfff]")


class ValueType(Enum):
    """The type of a JSON value."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class WriteKind(Enum):
    """How a literal write value is spliced into a document."""

    RAW = "raw"
    """The literal is already JSON and is inserted verbatim."""

    STRING = "string"
    """The literal is text and is inserted as a quoted JSON string."""


_TYPE_BY_FIRST_BYTE: Final[dict[int, ValueType]] = {
    QUOTE: ValueType.STRING,
    LBRACE: ValueType.OBJECT,
    LBRACKET: ValueType.ARRAY,
    ord("t"): ValueType.BOOL,
    ord("f"): ValueType.BOOL,
    ord("n"): ValueType.NULL,
}


def _reject_constant(name: str) -> None:
    msg = f"invalid JSON constant: {name}"
    raise MalformedValueError(msg)


def decode_json(data: "bytes | str") -> "JSONValue":
    """Decode a JSON text with the standard library decoder.

    Non-standard constants (NaN, Infinity) are rejected and excessive nesting
    is reported the same way as any other malformed input.

    Args:
        data: The JSON text.

    Returns:
        The decoded value.

    Raises:
        MalformedValueError: If the text is not a single well-formed JSON value.
    """
    try:
        return json.loads(data, parse_constant=_reject_constant)
    except RecursionError:
        msg = "malformed JSON: nesting depth exceeds maximum"
        raise MalformedValueError(msg) from None
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        msg = f"malformed JSON: {e}"
        raise MalformedValueError(msg) from e


def decode_key(buf: "Buffer", span: "Span") -> str:
    """Return the text of a quoted object key."""
    start, end = span
    raw = bytes(buf[start:end])
    if BACKSLASH not in raw:
        return raw[1:-1].decode("utf-8", errors="replace")
    key = decode_json(raw)
    if not isinstance(key, str):  # pragma: no cover
        msg = f"malformed JSON: expected string key at offset {start}"
        raise MalformedValueError(msg)
    return key


class Value:
    """A read-only view of one JSON value inside a buffer.

    A view holds only offsets and a reference to the buffer; nothing is
    copied until ``raw`` or one of the decoding methods is called. The view
    is invalid once the buffer it points into is mutated.
    """

    __slots__: ClassVar[tuple[str, ...]] = ("_buffer", "_end", "_start", "_type")

    _buffer: "Buffer"
    _start: int
    _end: int
    _type: ValueType

    def __init__(self, buffer: "Buffer", start: int, end: int) -> None:
        self._buffer = buffer
        self._start = start
        self._end = end
        self._type = _TYPE_BY_FIRST_BYTE.get(buffer[start], ValueType.NUMBER)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Value":
        """Wrap a complete JSON value that owns its whole buffer."""
        return cls(data, 0, len(data))

    @property
    def type(self) -> ValueType:
        """The JSON type of the value."""
        return self._type

    @property
    def buffer(self) -> "Buffer":
        """The buffer this view points into."""
        return self._buffer

    @property
    def start(self) -> int:
        """Offset of the first byte of the value."""
        return self._start

    @property
    def end(self) -> int:
        """Offset just past the last byte of the value."""
        return self._end

    @property
    def span(self) -> "Span":
        """The ``(start, end)`` byte range of the value."""
        return self._start, self._end

    @property
    def raw(self) -> bytes:
        """The verbatim bytes of the value."""
        return bytes(self._buffer[self._start : self._end])

    def is_array(self) -> bool:
        """Whether the value is a JSON array."""
        return self._type is ValueType.ARRAY

    def is_object(self) -> bool:
        """Whether the value is a JSON object."""
        return self._type is ValueType.OBJECT

    def string(self) -> str:
        """Return the display text of the value.

        Strings are unescaped, null is the empty string, and everything else
        is its raw JSON text.
        """
        if self._type is ValueType.NULL:
            return ""
        if self._type is ValueType.STRING:
            text = decode_json(self.raw)
            return text if isinstance(text, str) else ""
        return self.raw.decode("utf-8", errors="replace")

    def to_python(self) -> "JSONValue":
        """Decode the value into plain Python objects."""
        return decode_json(self.raw)

    def children(self) -> "list[Value]":
        """Return views of the direct children in document order.

        For an object these are the member values. Scalars have no children.
        """
        if self._type is ValueType.ARRAY:
            return [
                Value(self._buffer, start, end)
                for start, end in iter_elements(self._buffer, self._start, self._end)
            ]
        if self._type is ValueType.OBJECT:
            return [value for _, value in self.members()]
        return []

    def members(self) -> "list[tuple[str, Value]]":
        """Return ``(key, value)`` pairs of an object in document order.

        Duplicate keys are all reported. Non-objects have no members.
        """
        if self._type is not ValueType.OBJECT:
            return []
        return [
            (decode_key(self._buffer, key_span), Value(self._buffer, *value_span))
            for key_span, value_span in iter_members(
                self._buffer, self._start, self._end
            )
        ]

    def __repr__(self) -> str:
        return f"Value({self._type.value}, {self.raw!r})"


def infer_type(literal: str, raw: bool = False) -> WriteKind:  # noqa: FBT001, FBT002
    """Decide whether a literal is written as raw JSON or as a JSON string.

    Args:
        literal: The value text supplied by the caller.
        raw: Treat the literal as a JSON fragment unconditionally.

    Returns:
        WriteKind.RAW for explicit raw mode, ``true``/``false``/``null`` and
        finite JSON numbers; WriteKind.STRING otherwise.
    """
    if raw or literal in ("true", "false", "null"):
        return WriteKind.RAW
    if literal[:1] in ("-", "0", "1", "2", "3", "4", "5", "6", "7", "8", "9"):
        if _JSON_NUMBER.fullmatch(literal) and math.isfinite(float(literal)):
            return WriteKind.RAW
    return WriteKind.STRING


def infer_write_value(literal: str, raw: bool = False) -> bytes:  # noqa: FBT001, FBT002
    """Return the serialized bytes to splice for a literal write value.

    Args:
        literal: The value text supplied by the caller.
        raw: Treat the literal as a JSON fragment unconditionally.

    Returns:
        The JSON encoding of the value.

    Raises:
        MalformedValueError: If raw mode is requested and the literal is not
            well-formed JSON, or if the literal cannot be encoded as UTF-8.
    """
    if infer_type(literal, raw) is WriteKind.STRING:
        return encode_text(json.dumps(literal, ensure_ascii=False))
    fragment = literal.strip(" \t\r\n")
    _ = decode_json(fragment)
    return encode_text(fragment)


def encode_text(text: str) -> bytes:
    """Encode write-value text as UTF-8.

    Raises:
        MalformedValueError: If text holds a lone surrogate, as an undecodable
            command-line byte does.
    """
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError as e:
        msg = f"value is not valid UTF-8 text: {e.reason} at position {e.start}"
        raise MalformedValueError(msg) from e


def display_bytes(text: str) -> bytes:
    """Encode decoded text for output, replacing lone surrogates with U+FFFD."""
    return _LONE_SURROGATE.sub("\ufffd", text).encode("utf-8")
