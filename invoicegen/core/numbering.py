from __future__ import annotations

import math
from typing import List

from invoicegen.core.currency import to_decimal


ONES = ["", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine"]
TEENS = [
	"ten", "eleven", "twelve", "thirteen", "fourteen",
	"fifteen", "sixteen", "seventeen", "eighteen", "nineteen",
]
TENS = ["", "", "twenty", "thirty", "forty", "fifty", "sixty", "seventy", "eighty", "ninety"]

THOUSAND = 1_000
LAKH = 1_00_000
CRORE = 1_00_00_000


def _below_thousand(n: int) -> List[str]:
	words: List[str] = []
	hundreds, n = divmod(n, 100)
	if hundreds:
		words += [ONES[hundreds], "hundred"]
	if n >= 20:
		tens, n = divmod(n, 10)
		words.append(TENS[tens])
		if n:
			words.append(ONES[n])
	elif n >= 10:
		words.append(TEENS[n - 10])
	elif n:
		words.append(ONES[n])
	return words


def _below_crore(n: int) -> List[str]:
	# Indian grouping: lakh, thousand, then the last three digits
	words: List[str] = []
	lakhs, n = divmod(n, LAKH)
	if lakhs:
		words += _below_thousand(lakhs) + ["lakh"]
	thousands, n = divmod(n, THOUSAND)
	if thousands:
		words += _below_thousand(thousands) + ["thousand"]
	return words + _below_thousand(n)


def number_to_words(num: int) -> str:
	"""
	Convert a non-negative integer to lower-case English words using the
	Indian numbering system (thousand, lakh, crore).

	>>> number_to_words(123456)
	'one lakh twenty three thousand four hundred fifty six'
	"""
	n = int(num)
	if n < 0:
		raise ValueError(f"number_to_words expects a non-negative integer, got {num!r}")
	if n == 0:
		return "zero"
	crores, rest = divmod(n, CRORE)
	words: List[str] = []
	if crores:
		# counts of 1000+ crore have no dedicated unit; spell the count itself
		lead = _below_thousand(crores) if crores < THOUSAND else number_to_words(crores).split()
		words += lead + ["crore"]
	words += _below_crore(rest)
	return " ".join(words)


def amount_in_words(amount: object) -> str:
	"""Return 'Rupees <Words> Only' for the whole-rupee part of amount."""
	rupees = max(0, math.floor(to_decimal(amount)))
	words = " ".join(w.capitalize() for w in number_to_words(rupees).split())
	return f"Rupees {words} Only"
