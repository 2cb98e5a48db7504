"""Tests for amount and line parsing."""

from decimal import Decimal

import pytest

from claimflow.domain.entities import ClaimLine
from claimflow.utils.amount_parser import parse_amount, parse_line


def test_parse_amount_plain():
    assert parse_amount("123.45") == Decimal("123.45")


def test_parse_amount_with_currency_and_commas():
    assert parse_amount("$1,234.56") == Decimal("1234.56")
    assert parse_amount(" €5 ") == Decimal("5")


@pytest.mark.parametrize("value", ["", "   ", "abc", "1.2.3", "nan", "NaN", "Infinity", "-inf", "sNaN"])
def test_parse_amount_invalid(value):
    with pytest.raises(ValueError):
        parse_amount(value)


def test_parse_line():
    assert parse_line("Pen:10:1.00") == ClaimLine("Pen", 10, Decimal("1.00"))


def test_parse_line_name_with_colon():
    assert parse_line("Cable: USB-C:2:$7.50") == ClaimLine("Cable: USB-C", 2, Decimal("7.50"))


@pytest.mark.parametrize("value", ["Pen", "Pen:10", ":1:1.00", "Pen:ten:1.00", "Pen:1:x", "Pen:1:nan", "Pen:1:Infinity"])
def test_parse_line_invalid(value):
    with pytest.raises(ValueError):
        parse_line(value)
