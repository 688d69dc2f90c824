from __future__ import annotations

import datetime as _dt
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional


CENT = Decimal("0.01")


def to_decimal(x: object) -> Decimal:
	"""Best-effort conversion to Decimal via str to avoid binary float artifacts.

	None, booleans, non-numeric strings and non-finite values all become 0.
	"""
	if x is None or isinstance(x, bool):
		return Decimal("0")
	try:
		d = x if isinstance(x, Decimal) else Decimal(str(x).strip())
	except (InvalidOperation, ValueError, TypeError):
		return Decimal("0")
	return d if d.is_finite() else Decimal("0")


def round_money_dec(x: object) -> Decimal:
	"""Round to 2 decimals (half-up) and return Decimal."""
	return to_decimal(x).quantize(CENT, rounding=ROUND_HALF_UP)


def fmt_money(x: object) -> str:
	"""
	Format a monetary value with exactly two decimals.

	Anything that is not a finite number renders as "0.00".
	"""
	return f"{round_money_dec(x):.2f}"


def fmt_qty(qty: object) -> str:
	"""Format a quantity or percentage with up to 3 decimals, no trailing zeros."""
	d = to_decimal(qty).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
	s = f"{d:.3f}".rstrip("0").rstrip(".")
	return s if s not in ("", "-0") else "0"


def parse_date(val: object) -> Optional[_dt.date]:
	if isinstance(val, (_dt.date, _dt.datetime)):
		return val
	if isinstance(val, str) and val.strip():
		try:
			return _dt.datetime.fromisoformat(val.strip().replace("Z", "+00:00"))
		except ValueError:
			return None
	return None


def fmt_date(val: object) -> str:
	"""Format as zero-padded DD/MM/YYYY regardless of locale.

	Unparseable strings are returned unchanged; None gives an empty string.
	"""
	d = parse_date(val)
	if d is not None:
		return f"{d.day:02d}/{d.month:02d}/{d.year:04d}"
	return str(val) if val is not None else ""
