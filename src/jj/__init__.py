"""Read, query and edit JSON documents by key path."""

from importlib.metadata import version

from ._exceptions import (
    JJError,
    MalformedValueError,
    NotFoundError,
    PathParseError,
    TypeConflictError,
)
from ._mutate import delete, set_json, set_raw, set_value
from ._path import Step, parse_path
from ._query import get, resolve
from ._render import color_json, json_lines, pretty_json, render, ugly_json
from ._value import Value, ValueType, WriteKind, infer_type, infer_write_value

__version__ = version("jj")

__all__ = [
    "JJError",
    "MalformedValueError",
    "NotFoundError",
    "PathParseError",
    "Step",
    "TypeConflictError",
    "Value",
    "ValueType",
    "WriteKind",
    "__version__",
    "color_json",
    "delete",
    "get",
    "infer_type",
    "infer_write_value",
    "json_lines",
    "parse_path",
    "pretty_json",
    "render",
    "resolve",
    "set_json",
    "set_raw",
    "set_value",
    "ugly_json",
]
