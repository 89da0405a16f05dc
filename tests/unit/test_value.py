import pytest

from jj import MalformedValueError, Value, ValueType, WriteKind
from jj._value import (
    decode_json,
    display_bytes,
    encode_text,
    infer_type,
    infer_write_value,
)


class TestValueView:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (b"null", ValueType.NULL),
            (b"true", ValueType.BOOL),
            (b"false", ValueType.BOOL),
            (b"-3.5", ValueType.NUMBER),
            (b"0", ValueType.NUMBER),
            (b'"s"', ValueType.STRING),
            (b"[1]", ValueType.ARRAY),
            (b'{"a":1}', ValueType.OBJECT),
        ],
    )
    def test_type_from_first_byte(self, raw: bytes, expected: ValueType) -> None:
        assert Value.from_bytes(raw).type is expected

    def test_view_does_not_copy_until_raw(self) -> None:
        buffer = b'{"a":"xyz"}'
        view = Value(buffer, 5, 10)
        assert view.buffer is buffer
        assert view.span == (5, 10)
        assert view.raw == b'"xyz"'

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (b'"Anderson"', "Anderson"),
            (b'"line\\nbreak \\u00e9"', "line\nbreak é"),
            (b"null", ""),
            (b"true", "true"),
            (b"1e3", "1e3"),
            (b"[1, 2]", "[1, 2]"),
        ],
    )
    def test_string(self, raw: bytes, expected: str) -> None:
        assert Value.from_bytes(raw).string() == expected

    def test_to_python(self) -> None:
        value = Value.from_bytes(b'{"a":[1,2.5,"x",null,true]}')
        assert value.to_python() == {"a": [1, 2.5, "x", None, True]}

    def test_children_of_array(self) -> None:
        value = Value.from_bytes(b"[1, [2], {}]")
        assert [child.raw for child in value.children()] == [b"1", b"[2]", b"{}"]
        assert value.is_array()

    def test_children_of_object_are_member_values(self) -> None:
        value = Value.from_bytes(b'{"a": 1, "b": "two"}')
        assert [child.raw for child in value.children()] == [b"1", b'"two"']
        assert value.is_object()

    def test_members_keep_duplicates_and_unescape_keys(self) -> None:
        value = Value.from_bytes(b'{"a":1,"a":2,"\\u0062":3}')
        assert [(k, v.raw) for k, v in value.members()] == [
            ("a", b"1"),
            ("a", b"2"),
            ("b", b"3"),
        ]

    def test_scalars_have_no_children(self) -> None:
        assert Value.from_bytes(b"42").children() == []
        assert Value.from_bytes(b"42").members() == []

    def test_repr(self) -> None:
        assert repr(Value.from_bytes(b"[]")) == "Value(array, b'[]')"


class TestInferType:
    @pytest.mark.parametrize("literal", ["true", "false", "null"])
    def test_literals_are_raw(self, literal: str) -> None:
        assert infer_type(literal) is WriteKind.RAW

    @pytest.mark.parametrize("literal", ["0", "42", "-7", "3.14", "-0.5e-3", "1E10"])
    def test_numbers_are_raw(self, literal: str) -> None:
        assert infer_type(literal) is WriteKind.RAW

    @pytest.mark.parametrize(
        "literal",
        [
            "",
            "Smith",
            "True",
            "-inf",
            "-nan",
            "1_000",
            "01",
            "1.",
            ".5",
            "1e999",
            "12abc",
        ],
    )
    def test_everything_else_is_a_string(self, literal: str) -> None:
        assert infer_type(literal) is WriteKind.STRING

    def test_raw_flag_wins(self) -> None:
        assert infer_type("Smith", raw=True) is WriteKind.RAW


class TestInferWriteValue:
    def test_string_is_quoted_and_escaped(self) -> None:
        assert infer_write_value('say "hi"\n') == b'"say \\"hi\\"\\n"'

    def test_unicode_is_kept(self) -> None:
        assert infer_write_value("café") == '"café"'.encode()

    def test_number_is_verbatim(self) -> None:
        assert infer_write_value("-1.50") == b"-1.50"

    def test_raw_fragment_is_stripped(self) -> None:
        assert infer_write_value(' {"a": [1]} \n', raw=True) == b'{"a": [1]}'

    @pytest.mark.parametrize("literal", ["{", "Smith", "NaN", "[1,]", "1 2"])
    def test_malformed_raw_fragment(self, literal: str) -> None:
        with pytest.raises(MalformedValueError, match="malformed JSON|invalid JSON"):
            _ = infer_write_value(literal, raw=True)

    @pytest.mark.parametrize("raw", [False, True])
    def test_lone_surrogate_is_malformed(self, raw: bool) -> None:  # noqa: FBT001
        literal = "\"\udcff\"" if raw else "ab\udcff"
        with pytest.raises(MalformedValueError, match="not valid UTF-8"):
            _ = infer_write_value(literal, raw=raw)


class TestTextEncoding:
    def test_encode_text(self) -> None:
        assert encode_text("café") == "café".encode()

    def test_encode_text_rejects_surrogates(self) -> None:
        with pytest.raises(MalformedValueError, match="surrogates not allowed"):
            _ = encode_text("\ud800")

    def test_display_bytes_replaces_lone_surrogates(self) -> None:
        assert display_bytes("a\ud800b") == "a\ufffdb".encode()

    def test_display_bytes_keeps_pairs(self) -> None:
        text = Value.from_bytes(b'"\\ud83d\\ude00"').string()
        assert display_bytes(text) == "\U0001f600".encode()


class TestDecodeJson:
    def test_rejects_infinity(self) -> None:
        with pytest.raises(MalformedValueError, match="invalid JSON constant"):
            _ = decode_json("Infinity")

    def test_deep_nesting_is_malformed(self) -> None:
        data = "[" * 100_000 + "]" * 100_000
        with pytest.raises(MalformedValueError, match="nesting depth"):
            _ = decode_json(data)
