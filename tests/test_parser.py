"""Test class ExpressionParser and result formatting."""
import math

import pytest

from interactive_calculator.common.parser import (
    _is_number_char,
    ExpressionParser,
    format_number,
    format_plain,
    to_result_string,
)


def test_tokenize_basic():
    """Tokenize splits a buffer into numbers and operators."""
    tokens = ExpressionParser.tokenize("3+4*2")
    assert tokens == ["3", "+", "4", "*", "2"]


@pytest.mark.parametrize("raw,expected", [
    ("-5+2", ["-5", "+", "2"]),          # leading unary minus
    ("5*-3", ["5", "*", "-3"]),          # unary minus after an operator
    ("5--3", ["5", "-", "-3"]),          # binary then unary minus
    ("-.5", ["-.5"]),                    # unary minus before a decimal point
    ("5-3", ["5", "-", "3"]),            # binary minus
    ("-", ["-"]),                        # lone minus is an operator
    ("1.25/0.5", ["1.25", "/", "0.5"]),
])
def test_tokenize_minus(raw, expected):
    """Tokenize tells unary from binary minus by its context."""
    assert ExpressionParser.tokenize(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", " ", "x=y"])
def test_tokenize_empty_or_invalid(raw):
    """Tokenize returns no tokens for empty or fully invalid input."""
    assert ExpressionParser.tokenize(raw) == []


def test_tokenize_skips_unknown_characters():
    """Unknown characters are dropped without splitting numbers."""
    assert ExpressionParser.tokenize("1 2+a3") == ["12", "+", "3"]


@pytest.mark.parametrize("raw,expected", [
    ("3+4", ["3", "4", "+"]),
    ("3+4*2", ["3", "4", "2", "*", "+"]),
    ("10/2-1", ["10", "2", "/", "1", "-"]),
    ("8-3-2", ["8", "3", "-", "2", "-"]),   # left associative
    ("8/4*2", ["8", "4", "/", "2", "*"]),
    ("1+2*3-4", ["1", "2", "3", "*", "+", "4", "-"]),
])
def test_to_postfix_various(raw, expected):
    """to_postfix orders tokens by precedence, equal precedence pops first."""
    tokens = ExpressionParser.tokenize(raw)
    assert ExpressionParser.to_postfix(tokens) == expected


@pytest.mark.parametrize("raw", ["", "7", "-5+2", "1+2*3-4/5", "5*-3", "2+", "*", "1.5/-.5*3"])
def test_to_postfix_keeps_token_count(raw):
    """to_postfix never creates or drops tokens."""
    tokens = ExpressionParser.tokenize(raw)
    assert len(ExpressionParser.to_postfix(tokens)) == len(tokens)


@pytest.mark.parametrize("raw,expected", [
    ("2+3*4", 14.0),
    ("-5+2", -3.0),
    ("10-4", 6.0),
    ("8/2", 4.0),
    ("7+3*2-4/2", 11.0),
    ("8-3-2", 3.0),
    ("8/4*2", 4.0),
    ("5--3", 8.0),
    ("5*-3", -15.0),
    ("", 0.0),
])
def test_evaluate_valid(raw, expected):
    """Evaluate returns the expected value for well-formed buffers."""
    assert ExpressionParser.evaluate(raw) == expected


@pytest.mark.parametrize("raw", [
    "10/0",     # division by zero
    "1+10/0",   # poison propagates through later operators
    "2+",       # missing right operand
    "*",        # operator only
    ".",        # unparseable number
])
def test_evaluate_error_is_nan(raw):
    """Malformed buffers and division by zero evaluate to NaN instead of raising."""
    assert math.isnan(ExpressionParser.evaluate(raw))


def test_evaluate_postfix_leftover_operands():
    """A stack holding more than one value at the end is an error."""
    assert math.isnan(ExpressionParser.evaluate_postfix(["1", "2"]))


def test_evaluate_postfix_operand_order():
    """The first popped value is the right operand."""
    assert ExpressionParser.evaluate_postfix(["9", "3", "-"]) == 6.0
    assert ExpressionParser.evaluate_postfix(["9", "3", "/"]) == 3.0


@pytest.mark.parametrize("value,expected", [
    (14.0, "14"),
    (-3.0, "-3"),
    (0.5, "0.5"),
    (0.1 + 0.2, "0.3"),
    (1 / 3, "0.333333333333"),
    (-0.0, "0"),
    (-1e-13, "0"),
    (1e-7, "0.0000001"),
    (1e15, "1000000000000000"),
])
def test_format_number(value, expected):
    """Results are rounded to 12 decimals and written without exponent or trailing zeros."""
    assert format_number(value) == expected


@pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
def test_to_result_string_error(value):
    """Non-finite values are formatted as "Error"."""
    assert to_result_string(value) == "Error"


def test_to_result_string_division_by_zero():
    """Division by zero reaches the display as "Error"."""
    assert to_result_string(ExpressionParser.evaluate("10/0")) == "Error"


def test_to_result_string_overflow():
    """An overflow to infinity is an error as well."""
    assert to_result_string(ExpressionParser.evaluate("1" + "0" * 300 + "*" + "1" + "0" * 300)) == "Error"


@pytest.mark.parametrize("char,expected", [
    ("7", True),
    (".", True),
    ("-", False),
    ("", False),   # end of input is not a number character
    ("12", False),
])
def test_is_number_char(char, expected):
    """_is_number_char accepts exactly one digit or decimal point."""
    assert _is_number_char(char) == expected


@pytest.mark.parametrize("raw,expected", [
    ("5*-", ["5", "*", "-"]),
    ("-", ["-"]),
])
def test_tokenize_trailing_minus_is_operator(raw, expected):
    """A minus at the end of the buffer is never read as a sign."""
    assert ExpressionParser.tokenize(raw) == expected


@pytest.mark.parametrize("value,expected", [
    (0.5, "0.5"),
    (-0.03, "-0.03"),
    (1e-14, "0.00000000000001"),
    (0.00123456789012345, "0.00123456789012345"),
    (50.0, "50"),
    (-0.0, "0"),
])
def test_format_plain(value, expected):
    """format_plain writes every digit in positional notation."""
    assert format_plain(value) == expected
