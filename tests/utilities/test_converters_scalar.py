from __future__ import annotations

from decimal import Decimal

import pytest

from finance_importer.utilities.converters_scalar import (
    clean_number_like_string,
    parse_amount,
    to_bool,
    to_decimal,
    to_js_string,
)


# ---------- clean_number_like_string ----------
@pytest.mark.parametrize(
    "raw,decimal_char,expected",
    [
        ("1,234", "", "1234"),
        ("12,5", "", "12.5"),
        ("1,234.56", "", "1234.56"),
        ("1.234,56", "", "1234.56"),
        ("(1,234.56)", "", "-1234.56"),
        ("1234-", "", "-1234"),
        ("EUR 1.234,56", "", "1234.56"),
        ("1 234,56 zł", "", "1234.56"),
        ("−12.50", "", "-12.50"),
        ("+7", "", "7"),
        ("1.234", ",", "1234"),
        ("45,50", ",", "45.50"),
    ],
)
def test_clean_number_like_string(raw, decimal_char, expected):
    assert clean_number_like_string(raw, decimal_char) == expected


@pytest.mark.parametrize("raw,decimal_char", [("", ""), ("abc", ""), ("1.5", "x")])
def test_clean_number_like_string_rejects(raw, decimal_char):
    with pytest.raises(ValueError):
        clean_number_like_string(raw, decimal_char)


# ---------- to_decimal ----------
def test_to_decimal_passes_numbers_through():
    d = Decimal("2.50")
    assert to_decimal(d) is d
    assert to_decimal(3) == Decimal("3")
    assert to_decimal(1.1) == Decimal("1.1")  # no binary float artifacts


@pytest.mark.parametrize("bad", [True, float("nan"), float("inf"), None, [1]])
def test_to_decimal_rejects_unsupported(bad):
    with pytest.raises(ValueError):
        to_decimal(bad)


# ---------- parse_amount ----------
def test_parse_amount_counts_garbage_as_zero():
    """Cells without digits become zero instead of failing the row."""
    assert parse_amount("n/a") == Decimal("0")
    assert parse_amount("") == Decimal("0")
    assert parse_amount("-45,50", ",") == Decimal("-45.50")


# ---------- to_js_string ----------
@pytest.mark.parametrize(
    "value,expected",
    [
        (None, ""),
        (True, "true"),
        (False, "false"),
        (100.0, "100"),
        (1.5, "1.5"),
        (7, "7"),
        ("x", "x"),
        ({"a": 1}, '{"a":1}'),
        ([1, "ż"], '[1,"ż"]'),
    ],
)
def test_to_js_string(value, expected):
    assert to_js_string(value) == expected


# ---------- to_bool ----------
@pytest.mark.parametrize(
    "value,expected",
    [("Yes", True), (" on ", True), ("0", False), ("", False), (None, False), (2, True), (0.0, False)],
)
def test_to_bool(value, expected):
    assert to_bool(value) is expected


def test_to_bool_rejects_objects():
    with pytest.raises(ValueError):
        to_bool(object())
