from __future__ import annotations

import pytest

from invoicegen.core.numbering import amount_in_words, number_to_words


@pytest.mark.parametrize(
    "num, words",
    [
        (0, "zero"),
        (7, "seven"),
        (13, "thirteen"),
        (40, "forty"),
        (99, "ninety nine"),
        (100, "one hundred"),
        (215, "two hundred fifteen"),
        (1000, "one thousand"),
        (21005, "twenty one thousand five"),
        (99999, "ninety nine thousand nine hundred ninety nine"),
        (100000, "one lakh"),
        (250075, "two lakh fifty thousand seventy five"),
        (10000000, "one crore"),
        (12345678, "one crore twenty three lakh forty five thousand six hundred seventy eight"),
        (30000450, "three crore four hundred fifty"),
    ],
)
def test_number_to_words_indian_grouping(num: int, words: str) -> None:
    assert number_to_words(num) == words


def test_lakh_and_crore_prefixes() -> None:
    assert number_to_words(100000).startswith("one lakh")
    assert number_to_words(10000000).startswith("one crore")
    assert number_to_words(123456).startswith("one lakh")


def test_negative_numbers_are_rejected() -> None:
    with pytest.raises(ValueError):
        number_to_words(-1)


def test_amount_in_words_floors_and_capitalizes() -> None:
    assert amount_in_words(630.8) == "Rupees Six Hundred Thirty Only"
    assert amount_in_words(0) == "Rupees Zero Only"
    assert amount_in_words(None) == "Rupees Zero Only"
    assert amount_in_words("100000.99") == "Rupees One Lakh Only"
