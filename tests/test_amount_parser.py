"""Tests for amount parsing."""

import logging
from decimal import Decimal

import pytest

from ledgerline.utils.amount_parser import amount_or_zero, normalize_amount, parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("-123.45", Decimal("-123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("(123.45)", Decimal("-123.45")),
        ("  €10 ", Decimal("10")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "NaN", "Infinity", "-inf"])
def test_parse_amount_rejects(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_parse_amount_none():
    with pytest.raises(ValueError, match="Empty"):
        parse_amount(None)


def test_amount_or_zero(caplog):
    assert amount_or_zero("9.99") == Decimal("9.99")

    with caplog.at_level(logging.DEBUG, logger="ledgerline.utils.amount_parser"):
        assert amount_or_zero("oops") == Decimal("0")
    assert "oops" in caplog.text


def test_normalize_amount():
    assert normalize_amount("950") == "950.00"
    assert normalize_amount("$1,234.5") == "1234.50"
    assert normalize_amount("(3)") == "-3.00"
