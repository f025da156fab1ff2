from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

logger = logging.getLogger(__name__)

# Display prefix per ISO 4217 code. Read-only for the lifetime of the process.
CURRENCY_SYMBOLS: Mapping[str, str] = MappingProxyType({
	"USD": "$",
	"EUR": "€",
	"GBP": "£",
	"JPY": "¥",
	"CNY": "¥",
	"INR": "₹",
	"RUB": "₽",
	"KRW": "₩",
	"TRY": "₺",
	"ILS": "₪",
	"NGN": "₦",
	"PHP": "₱",
	"VND": "₫",
	"UAH": "₴",
	"THB": "฿",
	"PLN": "zł",
	"CHF": "CHF ",
	"SEK": "kr ",
	"NOK": "kr ",
	"DKK": "kr ",
	"CZK": "Kč ",
	"BRL": "R$",
	"ZAR": "R",
	"CAD": "CA$",
	"AUD": "A$",
	"NZD": "NZ$",
	"HKD": "HK$",
	"SGD": "S$",
	"MXN": "MX$",
})


def to_decimal(x: object) -> Decimal:
	"""Best-effort conversion to Decimal via str to avoid binary float artifacts."""
	try:
		return Decimal(str(x))
	except (InvalidOperation, ValueError, TypeError):
		return Decimal("0")


def round_money_dec(x: float | Decimal) -> Decimal:
	"""Round to 2 decimals using banker's rounding (round-half-to-even)."""
	d = to_decimal(x)
	return d.quantize(Decimal("0.01"), rounding=ROUND_HALF_EVEN)


def fmt_money(x: float | Decimal) -> str:
	"""Thousands-grouped amount with exactly two decimals, no currency prefix."""
	return f"{round_money_dec(x):,.2f}"


def sum_money(values: Iterable[float | Decimal]) -> Decimal:
	"""Accumulate monetary values using Decimal, without rounding."""
	total = Decimal("0")
	for v in values:
		total += to_decimal(v)
	return total


def currency_symbol(code: str | None) -> Optional[str]:
	"""Return the display symbol for ``code`` or None when the table has no entry."""
	if not code:
		return None
	return CURRENCY_SYMBOLS.get(code.strip().upper())


def _encodable(text: str, encoding: str) -> bool:
	try:
		text.encode(encoding)
	except UnicodeEncodeError:
		return False
	return True


def money_prefix(code: str | None, encoding: Optional[str] = None) -> str:
	"""Resolve the prefix drawn before amounts.

	Unknown codes fall back to the code itself followed by a space ("XYZ 10.00")
	and are logged as a warning. With ``encoding`` set, a symbol that the target
	font encoding cannot represent falls back to the code the same way.
	"""
	symbol = currency_symbol(code)
	if symbol is not None:
		if encoding is None or _encodable(symbol, encoding):
			return symbol
		fallback = code.strip().upper()
		logger.warning("Currency symbol %r is not in %s; using %r as prefix", symbol, encoding, fallback)
		return f"{fallback} "
	fallback = (code or "").strip().upper()
	logger.warning("Unknown currency code %r; using %r as prefix", code, fallback)
	return f"{fallback} " if fallback else ""


def format_money(amount: float | Decimal, currency_code: str | None) -> str:
	"""``<prefix><grouped integer part>.<2 digit fraction>``, e.g. ``$1,234.50``."""
	return money_prefix(currency_code) + fmt_money(amount)


def format_quantity(n: float | Decimal) -> str:
	"""Whole quantities without decimals, anything else with exactly one.

	Display only: the value used in line totals is never rounded.
	"""
	d = to_decimal(n)
	if d == d.to_integral_value():
		return f"{d:.0f}"
	return f"{d:.1f}"
