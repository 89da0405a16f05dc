"""Property-based tests for the rendering pipeline."""

import json
import re
from typing import TYPE_CHECKING

from hypothesis import given, strategies as st

from jj import color_json, json_lines, pretty_json, render, ugly_json

from .strategies import (
    json_container_strategy,
    json_value_strategy,
    serialized_strategy,
)

if TYPE_CHECKING:
    from hypothesis.strategies import DrawFn

    from jj._types import JSONValue

_ANSI = re.compile(rb"\x1b\[[0-9;]*m")


@st.composite
def document_strategy(draw: "DrawFn") -> "tuple[JSONValue, bytes]":
    value = draw(json_value_strategy)
    return value, draw(serialized_strategy(value))


class TestUglyProperties:
    @given(document_strategy())
    def test_idempotent(self, case: "tuple[JSONValue, bytes]") -> None:
        _, document = case
        once = ugly_json(document)
        assert ugly_json(once) == once

    @given(document_strategy())
    def test_preserves_structure(self, case: "tuple[JSONValue, bytes]") -> None:
        root, document = case
        assert json.loads(ugly_json(document)) == root

    @given(document_strategy())
    def test_has_no_whitespace_outside_strings(
        self, case: "tuple[JSONValue, bytes]"
    ) -> None:
        root, _ = case
        compact = json.dumps(root, separators=(",", ":"), ensure_ascii=False)
        spaced = json.dumps(root, indent=2, ensure_ascii=False)
        assert ugly_json(spaced.encode()) == compact.encode()


class TestPrettyProperties:
    @given(document_strategy())
    def test_preserves_structure(self, case: "tuple[JSONValue, bytes]") -> None:
        root, document = case
        assert json.loads(pretty_json(document)) == root

    @given(document_strategy())
    def test_ugly_undoes_pretty(self, case: "tuple[JSONValue, bytes]") -> None:
        _, document = case
        assert ugly_json(pretty_json(document)) == ugly_json(document)

    @given(json_value_strategy)
    def test_matches_standard_indentation(self, root: "JSONValue") -> None:
        document = json.dumps(root, separators=(",", ":"), ensure_ascii=False)
        expected = json.dumps(root, indent=2, ensure_ascii=False) + "\n"
        assert pretty_json(document.encode()) == expected.encode()


class TestColorProperties:
    @given(document_strategy())
    def test_stripping_escapes_restores_input(
        self, case: "tuple[JSONValue, bytes]"
    ) -> None:
        _, document = case
        assert _ANSI.sub(b"", color_json(document)) == document


class TestLinesProperties:
    @given(st.lists(json_value_strategy, max_size=5))
    def test_one_element_per_line(self, elements: "list[JSONValue]") -> None:
        document = json.dumps(elements, indent=2).encode()
        lines = json_lines(document).splitlines()
        assert [json.loads(line) for line in lines] == elements


class TestRenderProperties:
    @given(json_container_strategy)
    def test_single_trailing_newline(self, root: "JSONValue") -> None:
        document = json.dumps(root).encode() + b"\n\n"
        out = render(document, pretty=True, color=True)
        assert out.endswith(b"\n")
        assert not out.endswith(b"\n\n")
