"""Output rendering: pretty, ugly, per-line and colored JSON.

All formatting works on tokens of the raw bytes, so numbers, string escapes,
key order and duplicate keys come out exactly as they went in.
"""

from typing import TYPE_CHECKING

from ._constants import INDENT, KEY_SEPARATOR, TERMINAL_STYLE, Style
from ._scanner import document_span, iter_elements, tokenize
from ._value import ValueType

if TYPE_CHECKING:
    from ._scanner import Token
    from ._types import Buffer

__all__ = ["color_json", "json_lines", "pretty_json", "render", "ugly_json"]

_OPENERS = ("{", "[")
_CLOSERS = ("}", "]")


def ugly_json(data: "Buffer") -> bytes:
    """Strip all whitespace outside of strings."""
    out = bytearray()
    for token in tokenize(data):
        out += data[token.start : token.end]
    return bytes(out)


def pretty_json(data: "Buffer", *, indent: bytes = INDENT) -> bytes:
    """Reformat JSON with one member or element per line.

    Empty containers stay on one line as ``{}`` and ``[]``. Consecutive
    top-level values are separated by a newline. The output ends with a
    newline unless it is empty.

    Args:
        data: The JSON text.
        indent: The indent unit for each nesting level.

    Returns:
        The reformatted text.
    """
    out = bytearray()
    depth = 0
    previous: str | None = None
    for token in tokenize(data):
        kind = token.kind
        text = data[token.start : token.end]
        if kind in _CLOSERS:
            depth = max(depth - 1, 0)
            if previous not in _OPENERS:
                out += b"\n" + indent * depth
            out += text
        elif kind == ",":
            out += b",\n" + indent * depth
        elif kind == ":":
            out += KEY_SEPARATOR
        else:
            if previous in _OPENERS:
                out += b"\n" + indent * depth
            elif depth == 0 and out:
                out += b"\n"
            out += text
            if kind in _OPENERS:
                depth += 1
        previous = kind
    if out:
        out += b"\n"
    return bytes(out)


def _token_style(
    token: "Token", following: "Token | None", style: Style
) -> tuple[str, str] | None:
    kind = token.kind
    if kind == "string":
        if following is not None and following.kind == ":":
            return style.key
        return style.string
    if kind == "number":
        return style.number
    if kind == "true":
        return style.true
    if kind == "false":
        return style.false
    if kind == "null":
        return style.null
    if kind == "other":
        return None
    return style.punctuation


def color_json(data: "Buffer", *, style: Style = TERMINAL_STYLE) -> bytes:
    """Wrap each token in the ANSI sequences for its class.

    Whitespace between tokens is kept as is, so this can run after
    pretty_json() without disturbing the layout.
    """
    tokens = list(tokenize(data))
    out = bytearray()
    last = 0
    for position, token in enumerate(tokens):
        following = tokens[position + 1] if position + 1 < len(tokens) else None
        out += data[last : token.start]
        pair = _token_style(token, following, style)
        if pair is None:
            out += data[token.start : token.end]
        else:
            out += pair[0].encode("ascii")
            out += data[token.start : token.end]
            out += pair[1].encode("ascii")
        last = token.end
    out += data[last:]
    return bytes(out)


def json_lines(data: "Buffer") -> bytes:
    """Emit each element of a JSON array compactly on its own line."""
    span = document_span(data)
    if span is None:
        return b""
    out = bytearray()
    for start, end in iter_elements(data, *span):
        out += ugly_json(data[start:end])
        out += b"\n"
    return bytes(out)


def render(
    data: "Buffer",
    *,
    value_type: ValueType | None = None,
    pretty: bool = False,
    ugly: bool = False,
    lines: bool = False,
    color: bool = False,
    style: Style = TERMINAL_STYLE,
) -> bytes:
    """Turn a query result or document into final output bytes.

    Line mode applies to arrays and wins over pretty and ugly. Pretty wins
    over ugly. Neither touches a decoded string (``value_type`` STRING),
    which is plain text rather than JSON. Color is applied last. Non-empty
    output always ends with exactly one newline. Empty output, such as a
    query that matched nothing or null, stays empty so that a miss prints
    nothing at all.

    Args:
        data: The bytes to render.
        value_type: The type of a query result, or None for a whole document.
        pretty: Indent the output.
        ugly: Strip insignificant whitespace.
        lines: Emit array elements one per line.
        color: Add ANSI colors.
        style: The color table to use.

    Returns:
        The final output.

    Raises:
        MalformedValueError: If line mode meets a malformed array.
    """
    decoded_string = value_type is ValueType.STRING
    out = bytes(data)
    if lines and value_type is ValueType.ARRAY:
        out = json_lines(out)
    elif not decoded_string:
        if pretty:
            out = pretty_json(out)
        elif ugly:
            out = ugly_json(out)
    if not out:
        return out
    if color:
        if decoded_string:
            start, end = style.string
            out = start.encode("ascii") + out + end.encode("ascii")
        else:
            out = color_json(out, style=style)
    return out.rstrip(b"\n") + b"\n"
