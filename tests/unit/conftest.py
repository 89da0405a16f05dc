"""Shared fixtures for unit tests."""

import io
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture
def stdin(monkeypatch: pytest.MonkeyPatch) -> "Callable[[bytes], None]":
    """Provide a function that feeds bytes to the command's standard input.

    Returns:
        A callable that replaces ``sys.stdin`` with a stream over its argument.

    Example:
        def test_query(stdin: Callable[[bytes], None]) -> None:
            stdin(b'{"a":1}')
            assert main(["a"]) == 0
    """

    def feed(data: bytes) -> None:
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(data)))

    return feed


@pytest.fixture
def json_file(tmp_path: "Path") -> "Callable[[bytes], Path]":
    """Provide a factory that writes a JSON document to a temp file.

    Returns:
        A callable that writes its argument to ``in.json`` and returns the path.
    """

    def write(content: bytes) -> "Path":
        path = tmp_path / "in.json"
        _ = path.write_bytes(content)
        return path

    return write
