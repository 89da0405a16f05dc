"""Path resolution against a JSON buffer (read side)."""

import logging
from typing import TYPE_CHECKING

from ._constants import MAX_NESTING_DEPTH
from ._exceptions import NotFoundError
from ._path import coerce_path, format_path
from ._scanner import BACKSLASH, document_span, iter_elements, iter_members
from ._value import Value, ValueType, decode_key

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._path import Step
    from ._types import Buffer, Span

__all__ = ["find_element", "find_member", "get", "resolve", "resolve_step"]

logger = logging.getLogger(__name__)


def _key_matches(buf: "Buffer", key_span: "Span", key: bytes, text: str) -> bool:
    start, end = key_span
    inner = buf[start + 1 : end - 1]
    if BACKSLASH not in inner:
        return inner == key
    return decode_key(buf, key_span) == text


def find_member(
    buf: "Buffer", obj: "Span", key: str, *, max_depth: int = MAX_NESTING_DEPTH
) -> "tuple[Span, Span] | None":
    """Find the first member of an object whose key equals key.

    Args:
        buf: The buffer holding the object.
        obj: The span of the object.
        key: The member name to look for.
        max_depth: Maximum container nesting to follow.

    Returns:
        The key span and value span of the first matching member, or None.
    """
    encoded = key.encode("utf-8")
    for key_span, value_span in iter_members(buf, *obj, max_depth=max_depth):
        if _key_matches(buf, key_span, encoded, key):
            return key_span, value_span
    return None


def find_element(
    buf: "Buffer", array: "Span", index: int, *, max_depth: int = MAX_NESTING_DEPTH
) -> "Span | None":
    """Return the span of the element at index, or None if out of range."""
    for position, span in enumerate(iter_elements(buf, *array, max_depth=max_depth)):
        if position == index:
            return span
    return None


def resolve_step(
    current: Value, step: "Step", *, max_depth: int = MAX_NESTING_DEPTH
) -> Value | None:
    """Apply one path step to a value.

    The step is read as a member name when the value is an object and as an
    index when the value is an array. Scalars have nothing to step into.
    """
    buf = current.buffer
    if current.type is ValueType.OBJECT:
        member = find_member(buf, current.span, step.key, max_depth=max_depth)
        return None if member is None else Value(buf, *member[1])
    if current.type is ValueType.ARRAY:
        index = step.index
        if index is None:
            return None
        span = find_element(buf, current.span, index, max_depth=max_depth)
        return None if span is None else Value(buf, *span)
    return None


def _walk(current: Value, steps: "Sequence[Step]", max_depth: int) -> Value | None:
    for position, step in enumerate(steps):
        if step.is_count and current.is_array():
            elements = current.children()
            rest = steps[position + 1 :]
            if not rest:
                return Value.from_bytes(str(len(elements)).encode("ascii"))
            matches = [_walk(element, rest, max_depth) for element in elements]
            joined = b",".join(match.raw for match in matches if match is not None)
            return Value.from_bytes(b"[" + joined + b"]")
        found = resolve_step(current, step, max_depth=max_depth)
        if found is None:
            return None
        current = found
    return current


def resolve(
    document: "Buffer",
    path: "str | Sequence[Step]",
    *,
    max_depth: int = MAX_NESTING_DEPTH,
) -> Value | None:
    """Resolve a key path against a document.

    Each step scans only the direct children of the current value. ``#``
    against an array yields its length when it is the last step; otherwise
    the rest of the path is applied to every element and the matches are
    collected into a new array.

    Args:
        document: The JSON document.
        path: A key path string or parsed steps. An empty path selects the
            whole document.
        max_depth: Maximum container nesting to follow.

    Returns:
        A view of the matched value, or None if the path does not resolve.

    Raises:
        PathParseError: If the path string is malformed.
        MalformedValueError: If malformed JSON is met while scanning.
    """
    steps = coerce_path(path)
    span = document_span(document, max_depth=max_depth)
    if span is None:
        return None
    result = _walk(Value(document, *span), steps, max_depth)
    if result is None:
        logger.debug("path %r did not resolve", format_path(steps))
    return result


def get(
    document: "Buffer",
    path: "str | Sequence[Step]",
    *,
    max_depth: int = MAX_NESTING_DEPTH,
) -> Value:
    """Like resolve(), but raise NotFoundError on a miss.

    Raises:
        NotFoundError: If the path does not resolve.
        PathParseError: If the path string is malformed.
        MalformedValueError: If malformed JSON is met while scanning.
    """
    result = resolve(document, path, max_depth=max_depth)
    if result is None:
        raise NotFoundError(path if isinstance(path, str) else format_path(path))
    return result
