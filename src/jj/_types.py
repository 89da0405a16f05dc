"""Type aliases for jj.

This module contains ONLY TypeAlias definitions so that every other module
(including _exceptions.py) can import them without creating import cycles.
"""

from typing import TypeAlias

# JSON type definitions per RFC 8259
# Using string annotations for forward references to avoid runtime | issues
JSONPrimitive: TypeAlias = "str | int | float | bool | None"
"""A JSON primitive value: string, number, boolean, or null."""

JSONArray: TypeAlias = "list[JSONValue]"
"""A JSON array containing any JSON values."""

JSONObject: TypeAlias = "dict[str, JSONValue]"
"""A JSON object mapping string keys to JSON values."""

JSONValue: TypeAlias = "JSONPrimitive | JSONArray | JSONObject"
"""Any JSON value: primitive, array, or object."""

Buffer: TypeAlias = "bytes | bytearray"
"""A JSON document held in memory.

Mutations return new ``bytes`` unless an optimistic in-place update is
requested on a ``bytearray``, in which case that bytearray is edited.
"""

Span: TypeAlias = "tuple[int, int]"
"""A half-open byte range ``[start, end)`` within a buffer."""
