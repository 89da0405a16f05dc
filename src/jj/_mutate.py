"""Path-addressed set and delete over a JSON buffer (write side).

Every mutation is planned as a single splice: a byte range of the input and
the bytes that replace it. Everything outside that range is copied verbatim.
The splice is applied either by building a new buffer or, in optimistic mode,
by overwriting a bytearray in place when the replacement is not longer than
the range it replaces. Both paths produce the same document.
"""

import json
import logging
from typing import TYPE_CHECKING, NamedTuple

from ._constants import MAX_ARRAY_PADDING, MAX_NESTING_DEPTH
from ._exceptions import (
    MalformedValueError,
    NotFoundError,
    PathParseError,
    TypeConflictError,
)
from ._path import coerce_path, format_path
from ._query import find_element, find_member, resolve_step
from ._scanner import document_span, iter_elements, iter_members
from ._value import Value, ValueType, decode_json, encode_text, infer_write_value

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._path import KeyPath, Step
    from ._types import Buffer, JSONValue, Span

__all__ = [
    "Splice",
    "delete",
    "mutate_copying",
    "mutate_in_place",
    "plan_delete",
    "plan_set",
    "set_json",
    "set_raw",
    "set_value",
]

logger = logging.getLogger(__name__)


class Splice(NamedTuple):
    """Replace ``buffer[start:end]`` with ``replacement``."""

    start: int
    end: int
    replacement: bytes

    @property
    def fits(self) -> bool:
        """Whether the replacement is no longer than the range it replaces."""
        return len(self.replacement) <= self.end - self.start


def mutate_copying(buffer: "Buffer", splice: Splice) -> bytes:
    """Apply a splice by building a new buffer."""
    return b"".join(
        (
            bytes(buffer[: splice.start]),
            splice.replacement,
            bytes(buffer[splice.end :]),
        )
    )


def mutate_in_place(buffer: bytearray, splice: Splice) -> bytearray:
    """Apply a splice by overwriting buffer and truncating it.

    Args:
        buffer: The buffer to edit. It is modified and returned.
        splice: A splice whose replacement fits in the range it replaces.

    Returns:
        The same bytearray, shortened to its new length.

    Raises:
        ValueError: If the replacement is longer than the replaced range.
    """
    if not splice.fits:
        msg = "replacement is longer than the range it replaces"
        raise ValueError(msg)
    size = len(splice.replacement)
    buffer[splice.start : splice.start + size] = splice.replacement
    del buffer[splice.start + size : splice.end]
    return buffer


def _apply(buffer: "Buffer", splice: Splice, *, optimistic: bool) -> "Buffer":
    if optimistic and isinstance(buffer, bytearray) and splice.fits:
        logger.debug("splicing %d..%d in place", splice.start, splice.end)
        return mutate_in_place(buffer, splice)
    logger.debug("splicing %d..%d by copy", splice.start, splice.end)
    return mutate_copying(buffer, splice)


def _encode_key(key: str) -> bytes:
    return json.dumps(key, ensure_ascii=False).encode("utf-8")


def _padding(count: int) -> bytes:
    if count > MAX_ARRAY_PADDING:
        msg = f"cannot pad an array with {count} nulls: limit is {MAX_ARRAY_PADDING}"
        raise TypeConflictError(msg)
    return b"null," * count


def _build(steps: "Sequence[Step]", value: bytes) -> bytes:
    """Serialize value nested inside containers for each of steps."""
    for step in reversed(steps):
        index = step.index
        if step.is_append:
            value = b"[" + value + b"]"
        elif index is not None:
            value = b"[" + _padding(index) + value + b"]"
        else:
            value = b"{" + _encode_key(step.key) + b":" + value + b"}"
    return value


def _last_member_end(buf: "Buffer", obj: "Span", max_depth: int) -> int | None:
    last: int | None = None
    for _, (_, end) in iter_members(buf, *obj, max_depth=max_depth):
        last = end
    return last


def plan_set(
    document: "Buffer",
    steps: "KeyPath",
    value: bytes,
    *,
    max_depth: int = MAX_NESTING_DEPTH,
) -> Splice:
    """Work out the splice that writes value at steps.

    Missing members are appended to the nearest existing object, arrays are
    padded with nulls up to a missing index, and whatever is still missing
    below that point is built from the remaining steps.

    Raises:
        TypeConflictError: If a step meets a value it cannot step into, or
            reaching an index would take more than MAX_ARRAY_PADDING nulls.
        MalformedValueError: If malformed JSON is met while scanning.
    """
    span = document_span(document, max_depth=max_depth)
    if span is None:
        return Splice(0, len(document), _build(steps, value))
    current = Value(document, *span)
    for position, step in enumerate(steps):
        rest = steps[position + 1 :]
        if current.type is ValueType.OBJECT:
            member = find_member(document, current.span, step.key, max_depth=max_depth)
            if member is not None:
                current = Value(document, *member[1])
                continue
            last = _last_member_end(document, current.span, max_depth)
            insert_at = current.start + 1 if last is None else last
            prefix = b"" if last is None else b","
            addition = prefix + _encode_key(step.key) + b":" + _build(rest, value)
            return Splice(insert_at, insert_at, addition)
        if current.type is ValueType.ARRAY:
            index = step.index
            if index is None and not step.is_append:
                msg = (
                    f"cannot use key {step.key!r} on an array at "
                    f"{format_path(steps[:position])!r}"
                )
                raise TypeConflictError(msg)
            elements = list(iter_elements(document, *current.span, max_depth=max_depth))
            if index is None:
                index = len(elements)
            if index < len(elements):
                current = Value(document, *elements[index])
                continue
            insert_at = elements[-1][1] if elements else current.start + 1
            prefix = b"," if elements else b""
            padding = _padding(index - len(elements))
            return Splice(insert_at, insert_at, prefix + padding + _build(rest, value))
        msg = (
            f"cannot set {format_path(steps)!r}: "
            f"{format_path(steps[:position]) or 'document'!r} is a "
            f"{current.type.value}, not an object or array"
        )
        raise TypeConflictError(msg)
    return Splice(current.start, current.end, value)


def plan_delete(
    document: "Buffer",
    steps: "KeyPath",
    *,
    max_depth: int = MAX_NESTING_DEPTH,
) -> Splice:
    """Work out the splice that removes the value at steps.

    The member (or element) is removed together with the comma that separates
    it from its neighbour. Removing the only member also removes the
    whitespace around it, leaving ``{}`` or ``[]``.

    Raises:
        PathParseError: If steps is empty.
        NotFoundError: If there is nothing at steps.
        MalformedValueError: If malformed JSON is met while scanning.
    """
    if not steps:
        msg = "cannot delete the whole document"
        raise PathParseError(msg)
    span = document_span(document, max_depth=max_depth)
    if span is None:
        raise NotFoundError(format_path(steps))
    parent: Value | None = Value(document, *span)
    for step in steps[:-1]:
        if parent is None:
            break
        parent = resolve_step(parent, step, max_depth=max_depth)
    if parent is None:
        raise NotFoundError(format_path(steps))

    last = steps[-1]
    children: list[Span] = []
    target: Span | None = None
    if parent.type is ValueType.OBJECT:
        member = find_member(document, parent.span, last.key, max_depth=max_depth)
        if member is not None:
            target = (member[0][0], member[1][1])
            members = iter_members(document, *parent.span, max_depth=max_depth)
            children = [(key[0], value[1]) for key, value in members]
    elif parent.type is ValueType.ARRAY and last.index is not None:
        target = find_element(document, parent.span, last.index, max_depth=max_depth)
        if target is not None:
            children = list(iter_elements(document, *parent.span, max_depth=max_depth))
    if target is None:
        raise NotFoundError(format_path(steps))

    position = children.index(target)
    if len(children) == 1:
        return Splice(parent.start + 1, parent.end - 1, b"")
    if position > 0:
        return Splice(children[position - 1][1], target[1], b"")
    return Splice(target[0], children[1][0], b"")


def set_raw(
    document: "Buffer",
    path: "str | Sequence[Step]",
    value: "bytes | str",
    *,
    optimistic: bool = False,
    max_depth: int = MAX_NESTING_DEPTH,
) -> "Buffer":
    """Write a JSON fragment verbatim at path.

    Args:
        document: The JSON document.
        path: A key path string or parsed steps. An empty path replaces the
            whole document.
        value: A well-formed JSON value.
        optimistic: Edit a bytearray document in place when the new value is
            no longer than the old one.
        max_depth: Maximum container nesting to follow.

    Returns:
        The new document.

    Raises:
        PathParseError: If the path is malformed.
        MalformedValueError: If value is not well-formed JSON or not UTF-8.
        TypeConflictError: If the path does not fit the document's shape.
    """
    steps = coerce_path(path)
    fragment = encode_text(value) if isinstance(value, str) else value
    fragment = fragment.strip(b" \t\r\n")
    _ = decode_json(fragment)
    splice = plan_set(document, steps, fragment, max_depth=max_depth)
    return _apply(document, splice, optimistic=optimistic)


def set_value(
    document: "Buffer",
    path: "str | Sequence[Step]",
    value: str,
    *,
    raw: bool = False,
    optimistic: bool = False,
    max_depth: int = MAX_NESTING_DEPTH,
) -> "Buffer":
    """Write a literal at path, inferring its JSON type.

    ``true``, ``false``, ``null`` and numbers are written as JSON literals,
    anything else as a JSON string. With ``raw=True`` the literal is written
    as a JSON fragment.

    Raises:
        PathParseError: If the path is malformed.
        MalformedValueError: If raw is set and value is not well-formed JSON.
        TypeConflictError: If the path does not fit the document's shape.
    """
    steps = coerce_path(path)
    encoded = infer_write_value(value, raw)
    splice = plan_set(document, steps, encoded, max_depth=max_depth)
    return _apply(document, splice, optimistic=optimistic)


def set_json(
    document: "Buffer",
    path: "str | Sequence[Step]",
    value: "JSONValue",
    *,
    optimistic: bool = False,
    max_depth: int = MAX_NESTING_DEPTH,
) -> "Buffer":
    """Serialize a Python value compactly and write it at path.

    Raises:
        PathParseError: If the path is malformed.
        MalformedValueError: If value contains NaN or infinity.
        TypeConflictError: If the path does not fit the document's shape.
    """
    try:
        text = json.dumps(
            value, ensure_ascii=False, separators=(",", ":"), allow_nan=False
        )
    except ValueError as e:
        msg = f"value is not representable as JSON: {e}"
        raise MalformedValueError(msg) from e
    return set_raw(document, path, text, optimistic=optimistic, max_depth=max_depth)


def delete(
    document: "Buffer",
    path: "str | Sequence[Step]",
    *,
    optimistic: bool = False,
    max_depth: int = MAX_NESTING_DEPTH,
) -> "Buffer":
    """Remove the value at path.

    Args:
        document: The JSON document.
        path: A key path string or parsed steps.
        optimistic: Edit a bytearray document in place.
        max_depth: Maximum container nesting to follow.

    Returns:
        The new document.

    Raises:
        PathParseError: If the path is empty or malformed.
        NotFoundError: If there is nothing at path.
    """
    steps = coerce_path(path)
    splice = plan_delete(document, steps, max_depth=max_depth)
    return _apply(document, splice, optimistic=optimistic)
