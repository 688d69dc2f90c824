from __future__ import annotations

import datetime as dt
import re
from decimal import Decimal

import pytest

from invoicegen.core.currency import fmt_date, fmt_money, fmt_qty, to_decimal


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, "0.00"),
        (5, "5.00"),
        (12.5, "12.50"),
        (2.675, "2.68"),
        (1.005, "1.01"),
        (Decimal("60.78947368421055"), "60.79"),
        ("99.999", "100.00"),
        (-3.14159, "-3.14"),
    ],
)
def test_fmt_money_two_decimals(value, expected) -> None:
    assert fmt_money(value) == expected


@pytest.mark.parametrize("value", [None, "", "abc", float("nan"), float("inf"), object()])
def test_fmt_money_non_numeric_is_zero(value) -> None:
    assert fmt_money(value) == "0.00"


def test_fmt_money_always_has_two_fraction_digits() -> None:
    for value in (0.1, 1 / 3, 10 ** 7 + 0.005, 123456.789):
        assert re.fullmatch(r"-?\d+\.\d{2}", fmt_money(value))


def test_to_decimal_reads_padded_strings() -> None:
    assert to_decimal("  42 ") == Decimal("42")


def test_fmt_qty_strips_trailing_zeros() -> None:
    assert fmt_qty(Decimal("80")) == "80"
    assert fmt_qty(12.5) == "12.5"
    assert fmt_qty(None) == "0"


def test_fmt_date_is_dd_mm_yyyy() -> None:
    assert fmt_date(dt.date(2025, 3, 2)) == "02/03/2025"
    assert fmt_date(dt.datetime(2024, 12, 31, 23, 59)) == "31/12/2024"
    assert fmt_date("2025-08-09T10:00:00Z") == "09/08/2025"
    assert fmt_date("not a date") == "not a date"
    assert fmt_date(None) == ""
