import pytest

from jj import PathParseError
from jj._path import Step, coerce_path, format_path, parse_path


class TestParsePath:
    def test_empty_path_has_no_steps(self) -> None:
        assert parse_path("") == ()

    def test_single_key(self) -> None:
        assert parse_path("name") == (Step("name"),)

    def test_dotted_keys(self) -> None:
        assert parse_path("name.last") == (Step("name"), Step("last"))

    def test_numeric_segment_stays_a_key(self) -> None:
        steps = parse_path("a.1")
        assert steps == (Step("a"), Step("1"))
        assert steps[1].key == "1"

    def test_escaped_dot_is_part_of_key(self) -> None:
        assert parse_path("fav\\.movie") == (Step("fav.movie"),)

    def test_escaped_backslash(self) -> None:
        assert parse_path("a\\\\.b") == (Step("a\\"), Step("b"))

    def test_escape_of_ordinary_character(self) -> None:
        assert parse_path("\\a") == (Step("a"),)

    def test_empty_segments_are_empty_keys(self) -> None:
        assert parse_path("a..b") == (Step("a"), Step(""), Step("b"))
        assert parse_path(".") == (Step(""), Step(""))

    def test_unicode_keys(self) -> None:
        assert parse_path("café.名前") == (Step("café"), Step("名前"))

    @pytest.mark.parametrize("path", ["\\", "a\\", "a.b\\"])
    def test_trailing_escape_rejected(self, path: str) -> None:
        with pytest.raises(PathParseError, match="malformed escape"):
            _ = parse_path(path)


class TestStep:
    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("0", 0),
            ("12", 12),
            ("007", 7),
            ("-1", None),
            ("1.5", None),
            ("", None),
            ("a1", None),
            ("١", None),  # Arabic-Indic digit one
        ],
    )
    def test_index(self, key: str, expected: int | None) -> None:
        assert Step(key).index == expected

    def test_append_marker(self) -> None:
        assert Step("-1").is_append
        assert not Step("1").is_append

    def test_count_marker(self) -> None:
        assert Step("#").is_count
        assert not Step("a#").is_count


class TestFormatPath:
    def test_roundtrip_with_escapes(self) -> None:
        path = "a\\.b.c\\\\d.e"
        assert format_path(parse_path(path)) == path

    def test_plain_path(self) -> None:
        assert format_path((Step("a"), Step("0"))) == "a.0"

    def test_single_empty_key_formats_as_whole_document(self) -> None:
        assert format_path((Step(""),)) == ""
        assert parse_path(format_path((Step(""),))) == ()


class TestCoercePath:
    def test_accepts_string(self) -> None:
        assert coerce_path("a.b") == (Step("a"), Step("b"))

    def test_accepts_steps(self) -> None:
        assert coerce_path([Step("a")]) == (Step("a"),)

    def test_rejects_undecodable_string(self) -> None:
        with pytest.raises(PathParseError, match="not valid UTF-8"):
            _ = coerce_path("a.\udcff")

    def test_rejects_undecodable_step(self) -> None:
        with pytest.raises(PathParseError, match="not valid UTF-8"):
            _ = coerce_path([Step("a"), Step("\ud800")])
