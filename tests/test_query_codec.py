"""Tests for routeurl.query — percent-encoding and the query codec."""

import pytest

from routeurl.config import UrlConfig
from routeurl.errors import MalformedQueryError
from routeurl.query import (
    decode_component,
    encode_component,
    iter_query_items,
    parse_search,
    query_to_string,
    string_to_query,
)

LEGACY = UrlConfig(omit_absent_values=False)
LENIENT = UrlConfig(strict_decoding=False)


class TestEncodeComponent:
    def test_space(self) -> None:
        assert encode_component("a b") == "a%20b"

    def test_utf8(self) -> None:
        assert encode_component("é") == "%C3%A9"

    def test_unreserved_kept(self) -> None:
        assert encode_component("Az09-_.!~*'()") == "Az09-_.!~*'()"

    def test_reserved_escaped(self) -> None:
        assert encode_component("&=?/#+:") == "%26%3D%3F%2F%23%2B%3A"

    def test_empty(self) -> None:
        assert encode_component("") == ""


class TestDecodeComponent:
    def test_escapes(self) -> None:
        assert decode_component("a%20b%C3%A9") == "a bé"

    def test_plus_is_literal(self) -> None:
        assert decode_component("a+b") == "a+b"

    @pytest.mark.parametrize("text", ["%zz", "%", "abc%2", "%C3%A9%"])
    def test_incomplete_escape_raises(self, text: str) -> None:
        with pytest.raises(MalformedQueryError, match="incomplete"):
            decode_component(text)

    def test_invalid_utf8_raises(self) -> None:
        with pytest.raises(MalformedQueryError, match="UTF-8"):
            decode_component("%FF")

    def test_lenient_leaves_bad_escape(self) -> None:
        assert decode_component("%zz", strict=False) == "%zz"

    def test_lenient_replaces_bad_bytes(self) -> None:
        assert decode_component("%FF", strict=False) == "�"


class TestStringToQuery:
    def test_empty(self) -> None:
        assert string_to_query("") == {}

    def test_full_url(self) -> None:
        assert string_to_query("https://a.b/p?x=1&y=two#frag") == {"x": "1", "y": "two"}

    def test_query_only(self) -> None:
        assert string_to_query("?a=1") == {"a": "1"}

    def test_without_question_mark_whole_string_is_query(self) -> None:
        assert string_to_query("a=1&b=2") == {"a": "1", "b": "2"}

    def test_fragment_dropped(self) -> None:
        assert string_to_query("?a=1#b=2") == {"a": "1"}

    def test_empty_segments_skipped(self) -> None:
        assert string_to_query("?a=1&&b=2&") == {"a": "1", "b": "2"}

    def test_empty_key_skipped(self) -> None:
        assert string_to_query("?=1&a=2") == {"a": "2"}

    def test_missing_value_is_empty_string(self) -> None:
        assert string_to_query("?flag") == {"flag": ""}

    def test_splits_on_first_equals(self) -> None:
        assert string_to_query("?a=b=c") == {"a": "b=c"}

    def test_values_decoded(self) -> None:
        assert string_to_query("?q=a%20%26%20b") == {"q": "a & b"}

    def test_later_duplicate_wins(self) -> None:
        assert string_to_query("?x=1&x=2") == {"x": "2"}

    def test_malformed_value_raises(self) -> None:
        with pytest.raises(MalformedQueryError):
            string_to_query("?x=%zz")

    def test_malformed_value_lenient(self) -> None:
        assert string_to_query("?x=%zz", config=LENIENT) == {"x": "%zz"}


class TestParseSearch:
    def test_blank_keys_dropped_by_default(self) -> None:
        assert parse_search("=x&y=1") == {"y": "1"}

    def test_blank_keys_kept(self) -> None:
        assert parse_search("=x&y=1", keep_blank_keys=True) == {"": "x", "y": "1"}


class TestQueryToString:
    def test_absent_values_omitted(self) -> None:
        assert query_to_string({"a": 1, "b": "two", "c": None}) == "?a=1&b=two"

    def test_false_omitted(self) -> None:
        assert query_to_string({"f": False}) == ""

    def test_zero_and_empty_string_kept(self) -> None:
        assert query_to_string({"z": 0, "e": ""}) == "?z=0&e="

    def test_legacy_renders_every_value(self) -> None:
        rendered = query_to_string({"a": 1, "b": "two", "c": None}, config=LEGACY)
        assert rendered == "?a=1&b=two&c=null"

    def test_legacy_renders_false(self) -> None:
        assert query_to_string({"f": False, "t": True}, config=LEGACY) == "?f=false&t=true"

    def test_empty_mapping(self) -> None:
        assert query_to_string({}) == ""

    def test_empty_mapping_ignores_prefix(self) -> None:
        assert query_to_string({}, "&") == ""

    def test_custom_prefix(self) -> None:
        assert query_to_string({"a": "1"}, "") == "a=1"
        assert query_to_string({"a": "1"}, "&") == "&a=1"

    def test_empty_key_skipped(self) -> None:
        assert query_to_string({"": "x", "a": "1"}) == "?a=1"

    def test_insertion_order(self) -> None:
        assert query_to_string({"b": "2", "a": "1"}) == "?b=2&a=1"

    def test_values_encoded(self) -> None:
        assert query_to_string({"q": "a & b"}) == "?q=a%20%26%20b"

    def test_structured_value_as_encoded_json(self) -> None:
        assert query_to_string({"d": {"k": 1}}) == "?d=%7B%22k%22%3A1%7D"


class TestIterQueryItems:
    def test_stringifies(self) -> None:
        items = list(iter_query_items({"n": 3, "b": True, "s": "x"}))
        assert items == [("n", "3"), ("b", "true"), ("s", "x")]

    def test_keep_absent(self) -> None:
        items = list(iter_query_items({"n": None}, omit_absent=False))
        assert items == [("n", "null")]


class TestInverse:
    @pytest.mark.parametrize(
        "mapping",
        [
            {"a": "1"},
            {"a": "1", "b": "x y", "c": "é"},
            {"path": "/a/b?c=d#e", "empty": ""},
        ],
    )
    def test_string_mapping_survives(self, mapping: dict[str, str]) -> None:
        assert string_to_query(query_to_string(mapping, "")) == mapping
        assert string_to_query(query_to_string(mapping)) == mapping
