"""Unit tests for sfv.parser: recursive-descent parser producing value trees."""
from __future__ import annotations

import decimal

import pytest

from sfv.ast.nodes import (
    Boolean,
    ByteSequence,
    Decimal,
    Dictionary,
    FieldType,
    InnerList,
    Integer,
    Item,
    List,
    Parameters,
    String,
    Token,
)
from sfv.parser.errors import ErrorKind, ParseError
from sfv.parser.parser import Parser, parse


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_item(text: str) -> Item:
    result = parse(text, "item")
    assert isinstance(result, Item)
    return result


def bare(text: str):  # type: ignore[no-untyped-def]
    return parse_item(text).bare


def error_kind(text: str, field_type: str = "item") -> ErrorKind:
    with pytest.raises(ParseError) as exc_info:
        parse(text, field_type)
    return exc_info.value.kind


def params(*pairs) -> Parameters:  # type: ignore[no-untyped-def]
    return Parameters(tuple(pairs))


# ---------------------------------------------------------------------------
# Top-level entry point
# ---------------------------------------------------------------------------


class TestParseEntryPoint:
    def test_accepts_bytes(self) -> None:
        assert parse(b"42", "item") == Item(Integer(42))

    def test_accepts_str(self) -> None:
        assert parse("42", "item") == Item(Integer(42))

    def test_accepts_bytearray(self) -> None:
        assert parse(bytearray(b"?1"), "item") == Item(Boolean(True))

    def test_accepts_memoryview(self) -> None:
        assert parse(memoryview(b"a, b"), "list") == List((Item(Token("a")), Item(Token("b"))))

    def test_accepts_field_type_enum(self) -> None:
        assert parse("a", FieldType.LIST) == List((Item(Token("a")),))

    def test_unknown_field_type_raises_value_error(self) -> None:
        with pytest.raises(ValueError, match="field type"):
            parse("1", "header")

    def test_non_ascii_bytes(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse(b"a\xff", "item")
        assert exc_info.value.kind is ErrorKind.NON_ASCII_INPUT
        assert exc_info.value.offset == 1

    def test_non_ascii_str(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse('"café"', "item")
        assert exc_info.value.kind is ErrorKind.NON_ASCII_INPUT
        assert exc_info.value.offset == 4

    def test_leading_and_trailing_spaces_are_discarded(self) -> None:
        assert parse("   1   ", "item") == Item(Integer(1))

    def test_leading_tab_is_not_discarded(self) -> None:
        assert error_kind("\t1") is ErrorKind.UNRECOGNIZED_ITEM_TYPE

    def test_trailing_garbage(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("1 x", "item")
        assert exc_info.value.kind is ErrorKind.TRAILING_GARBAGE
        assert exc_info.value.offset == 2

    def test_trailing_tab_is_garbage(self) -> None:
        assert error_kind("1\t") is ErrorKind.TRAILING_GARBAGE

    def test_error_message_names_kind_and_offset(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("?2", "item")
        text = str(exc_info.value)
        assert "offset 1" in text
        assert "INVALID_BOOLEAN" in text


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


class TestLists:
    def test_empty_input_is_empty_list(self) -> None:
        assert parse("", "list") == List()

    def test_only_spaces_is_empty_list(self) -> None:
        assert parse("   ", "list") == List()

    def test_single_token_with_decimal_parameter(self) -> None:
        result = parse("text/html;q=1.0", "list")
        assert result == List(
            (Item(Token("text/html"), params(("q", Decimal(decimal.Decimal("1.0"))))),)
        )

    def test_whitespace_around_separators(self) -> None:
        result = parse("text/html  ,  text/plain;  q=0.5;  charset=utf-8", "list")
        assert isinstance(result, List)
        assert len(result) == 2
        assert result[0] == Item(Token("text/html"))
        second = result[1]
        assert isinstance(second, Item)
        assert second.bare == Token("text/plain")
        assert second.params.keys() == ["q", "charset"]
        assert second.params["q"] == Decimal("0.5")
        assert second.params["charset"] == Token("utf-8")

    def test_tabs_allowed_around_comma(self) -> None:
        assert parse("1\t,\t2", "list") == List((Item(Integer(1)), Item(Integer(2))))

    def test_inner_list_member(self) -> None:
        result = parse('("foo" "bar");lvl=5, baz', "list")
        assert result == List(
            (
                InnerList((Item(String("foo")), Item(String("bar"))), params(("lvl", Integer(5)))),
                Item(Token("baz")),
            )
        )

    def test_trailing_comma(self) -> None:
        assert error_kind("1, 2,", "list") is ErrorKind.TRAILING_COMMA

    def test_trailing_comma_followed_by_spaces(self) -> None:
        assert error_kind("1,   ", "list") is ErrorKind.TRAILING_COMMA

    def test_missing_comma(self) -> None:
        assert error_kind("1 2", "list") is ErrorKind.EXPECTED_COMMA

    def test_leading_comma(self) -> None:
        assert error_kind(",1", "list") is ErrorKind.UNRECOGNIZED_ITEM_TYPE

    def test_double_comma(self) -> None:
        assert error_kind("1,,2", "list") is ErrorKind.UNRECOGNIZED_ITEM_TYPE


# ---------------------------------------------------------------------------
# Dictionaries
# ---------------------------------------------------------------------------


class TestDictionaries:
    def test_empty_input_is_empty_dictionary(self) -> None:
        assert parse("", "dictionary") == Dictionary()

    def test_boolean_true_shorthand_with_parameters(self) -> None:
        result = parse("a=1, b;foo=9, c=3", "dictionary")
        assert result == Dictionary(
            (
                ("a", Item(Integer(1))),
                ("b", Item(Boolean(True), params(("foo", Integer(9))))),
                ("c", Item(Integer(3))),
            )
        )

    def test_duplicate_key_keeps_first_position_last_value(self) -> None:
        result = parse("a=1, b;foo=9, a=3", "dictionary")
        assert isinstance(result, Dictionary)
        assert result.keys() == ["a", "b"]
        assert result["a"] == Item(Integer(3))
        assert len(result) == 2

    def test_explicit_false_value(self) -> None:
        result = parse("a=?0", "dictionary")
        assert result == Dictionary((("a", Item(Boolean(False))),))

    def test_inner_list_value(self) -> None:
        result = parse("a=(1 2);x", "dictionary")
        assert result == Dictionary(
            (("a", InnerList((Item(Integer(1)), Item(Integer(2))), params(("x", Boolean(True))))),)
        )

    def test_uppercase_key_rejected(self) -> None:
        assert error_kind("A=1", "dictionary") is ErrorKind.INVALID_KEY_START

    def test_space_before_equals_rejected(self) -> None:
        assert error_kind("a =1", "dictionary") is ErrorKind.EXPECTED_COMMA

    def test_trailing_comma(self) -> None:
        assert error_kind("a=1,", "dictionary") is ErrorKind.TRAILING_COMMA

    def test_missing_comma(self) -> None:
        assert error_kind("a=1 b=2", "dictionary") is ErrorKind.EXPECTED_COMMA


# ---------------------------------------------------------------------------
# Inner lists
# ---------------------------------------------------------------------------


class TestInnerLists:
    def test_empty_inner_list(self) -> None:
        assert parse("()", "list") == List((InnerList(),))

    def test_spaces_inside_parentheses(self) -> None:
        result = parse("(  1   2  )", "list")
        assert result == List((InnerList((Item(Integer(1)), Item(Integer(2)))),))

    def test_item_parameters_inside(self) -> None:
        result = parse("(a;x=1 b)", "list")
        inner = result[0]
        assert isinstance(inner, InnerList)
        assert inner.items[0].params["x"] == Integer(1)
        assert len(inner.params) == 0

    def test_unterminated(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("1, (a b", "list")
        assert exc_info.value.kind is ErrorKind.UNTERMINATED_INNER_LIST
        assert exc_info.value.offset == 3

    def test_unterminated_after_space(self) -> None:
        assert error_kind("(a ", "list") is ErrorKind.UNTERMINATED_INNER_LIST

    def test_comma_separator_rejected(self) -> None:
        assert error_kind("(1,2)", "list") is ErrorKind.MALFORMED_INNER_LIST_SEPARATOR

    def test_nested_inner_list_rejected(self) -> None:
        assert error_kind("((1))", "list") is ErrorKind.UNRECOGNIZED_ITEM_TYPE

    def test_inner_list_is_not_an_item(self) -> None:
        assert error_kind("(1)", "item") is ErrorKind.UNRECOGNIZED_ITEM_TYPE


# ---------------------------------------------------------------------------
# Parameters and keys
# ---------------------------------------------------------------------------


class TestParameters:
    def test_boolean_true_without_value(self) -> None:
        assert parse_item("a;flag").params == params(("flag", Boolean(True)))

    def test_space_after_semicolon(self) -> None:
        assert parse_item("a;  x=1").params["x"] == Integer(1)

    def test_space_before_semicolon_is_garbage(self) -> None:
        assert error_kind("a ;x=1") is ErrorKind.TRAILING_GARBAGE

    def test_duplicate_parameter_keys(self) -> None:
        item = parse_item("a;x=1;y=2;x=3")
        assert item.params == params(("x", Integer(3)), ("y", Integer(2)))

    def test_key_characters(self) -> None:
        item = parse_item("a;*k_e-y.9=1")
        assert item.params.keys() == ["*k_e-y.9"]

    def test_uppercase_parameter_key(self) -> None:
        assert error_kind("a;Q=1") is ErrorKind.INVALID_KEY_START

    def test_empty_parameter_key(self) -> None:
        assert error_kind("a;=1") is ErrorKind.INVALID_KEY_START

    def test_key_stops_at_uppercase(self) -> None:
        assert error_kind("a;kEy=1") is ErrorKind.TRAILING_GARBAGE

    def test_missing_parameter_value(self) -> None:
        assert error_kind("a;x=") is ErrorKind.UNRECOGNIZED_ITEM_TYPE


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------


class TestNumbers:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("0", 0),
            ("42", 42),
            ("-42", -42),
            ("-0", 0),
            ("007", 7),
            ("999999999999999", 999_999_999_999_999),
            ("-999999999999999", -999_999_999_999_999),
        ],
    )
    def test_integers(self, text: str, expected: int) -> None:
        assert bare(text) == Integer(expected)

    def test_sixteen_digit_integer(self) -> None:
        assert error_kind("1000000000000000") is ErrorKind.INTEGER_TOO_LONG

    def test_sixteen_digit_negative_integer(self) -> None:
        assert error_kind("-1000000000000000") is ErrorKind.INTEGER_TOO_LONG

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("1.5", "1.5"),
            ("-1.5", "-1.5"),
            ("0.001", "0.001"),
            ("1.000", "1"),
            ("123456789012.123", "123456789012.123"),
        ],
    )
    def test_decimals(self, text: str, expected: str) -> None:
        result = bare(text)
        assert isinstance(result, Decimal)
        assert result.value == decimal.Decimal(expected)

    def test_negative_decimal_sign(self) -> None:
        result = bare("-0.5")
        assert isinstance(result, Decimal)
        assert result.value < 0

    def test_lone_minus(self) -> None:
        assert error_kind("-") is ErrorKind.EMPTY_OR_INVALID_NUMBER

    def test_minus_letter(self) -> None:
        assert error_kind("-a") is ErrorKind.EMPTY_OR_INVALID_NUMBER

    def test_trailing_decimal_point(self) -> None:
        assert error_kind("1.") is ErrorKind.TRAILING_DECIMAL_POINT

    def test_too_many_fractional_digits(self) -> None:
        assert error_kind("1.1234") is ErrorKind.TOO_MANY_FRACTIONAL_DIGITS

    def test_integer_part_too_long(self) -> None:
        assert error_kind("1234567890123.1") is ErrorKind.DECIMAL_INTEGER_PART_TOO_LONG

    def test_decimal_too_long(self) -> None:
        assert error_kind("123456789012.1234") is ErrorKind.DECIMAL_TOO_LONG

    def test_second_point_is_garbage(self) -> None:
        assert error_kind("1.2.3") is ErrorKind.TRAILING_GARBAGE

    def test_leading_point_rejected(self) -> None:
        assert error_kind(".5") is ErrorKind.UNRECOGNIZED_ITEM_TYPE


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


class TestStrings:
    def test_plain(self) -> None:
        assert bare('"hello world"') == String("hello world")

    def test_empty(self) -> None:
        assert bare('""') == String("")

    def test_escapes(self) -> None:
        assert bare(r'"a\"b\\c"') == String('a"b\\c')

    def test_invalid_escape(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse(r'"a\nb"', "item")
        assert exc_info.value.kind is ErrorKind.INVALID_ESCAPE
        assert exc_info.value.offset == 2

    def test_backslash_at_end_of_input(self) -> None:
        assert error_kind('"abc\\') is ErrorKind.INVALID_ESCAPE

    def test_control_character(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse('"a\tb"', "item")
        assert exc_info.value.kind is ErrorKind.CONTROL_CHARACTER_IN_STRING
        assert exc_info.value.offset == 2

    def test_del_character(self) -> None:
        assert error_kind('"a\x7f"') is ErrorKind.CONTROL_CHARACTER_IN_STRING

    def test_unterminated(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse('x;a="abc', "item")
        assert exc_info.value.kind is ErrorKind.UNTERMINATED_STRING
        assert exc_info.value.offset == 4


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


class TestTokens:
    @pytest.mark.parametrize("text", ["a", "*", "text/html", "Foo:bar", "a!#$%&'*+-.^_`|~"])
    def test_valid(self, text: str) -> None:
        assert bare(text) == Token(text)

    def test_token_stops_at_delimiter(self) -> None:
        assert error_kind("foo(bar)") is ErrorKind.TRAILING_GARBAGE

    def test_direct_parse_rejects_digit_start(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            Parser("1abc").parse_token()
        assert exc_info.value.kind is ErrorKind.INVALID_TOKEN_START


# ---------------------------------------------------------------------------
# Byte sequences
# ---------------------------------------------------------------------------


class TestByteSequences:
    def test_padded(self) -> None:
        assert bare(":aGVsbG8=:") == ByteSequence(b"hello")

    def test_unpadded(self) -> None:
        assert bare(":aGVsbG8:") == ByteSequence(b"hello")

    def test_empty(self) -> None:
        assert bare("::") == ByteSequence(b"")

    def test_unterminated(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("a;b=:aGVsbG8", "item")
        assert exc_info.value.kind is ErrorKind.UNTERMINATED_BYTE_SEQUENCE
        assert exc_info.value.offset == 4

    def test_invalid_alphabet(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse(":aGV$bG8=:", "item")
        assert exc_info.value.kind is ErrorKind.INVALID_BASE64_ALPHABET
        assert exc_info.value.offset == 4

    def test_url_safe_alphabet_rejected(self) -> None:
        assert error_kind(":_-8=:") is ErrorKind.INVALID_BASE64_ALPHABET

    def test_single_trailing_character_does_not_decode(self) -> None:
        assert error_kind(":aGVsb:") is ErrorKind.BASE64_DECODE_ERROR

    def test_padding_in_the_middle(self) -> None:
        assert error_kind(":aG=sbG8=:") is ErrorKind.BASE64_DECODE_ERROR


# ---------------------------------------------------------------------------
# Booleans and dispatch
# ---------------------------------------------------------------------------


class TestBooleans:
    def test_true(self) -> None:
        assert bare("?1") == Boolean(True)

    def test_false(self) -> None:
        assert bare("?0") == Boolean(False)

    @pytest.mark.parametrize("text", ["?", "?2", "?t", "? 1"])
    def test_invalid(self, text: str) -> None:
        assert error_kind(text) is ErrorKind.INVALID_BOOLEAN


class TestBareItemDispatch:
    @pytest.mark.parametrize("text", ["", "@", "=", "'a'", "_a"])
    def test_unrecognized(self, text: str) -> None:
        assert error_kind(text) is ErrorKind.UNRECOGNIZED_ITEM_TYPE


# ---------------------------------------------------------------------------
# Parser cursor
# ---------------------------------------------------------------------------


class TestParserCursor:
    def test_production_leaves_cursor_after_itself(self) -> None:
        parser = Parser('"ab";x rest')
        assert parser.parse_item() == Item(String("ab"), params(("x", Boolean(True))))
        assert parser.position == 6
        assert parser.remaining == " rest"

    def test_at_end(self) -> None:
        parser = Parser("?1")
        parser.parse_boolean()
        assert parser.at_end()

    def test_parse_field_coerces_string_type(self) -> None:
        assert Parser("a, b").parse_field("list") == List((Item(Token("a")), Item(Token("b"))))
