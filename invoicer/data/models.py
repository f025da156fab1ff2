from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from invoicer.errors import InvoiceDataError


def _number(value: Any, what: str, default: float = 0.0) -> float:
	if value is None or value == "":
		return default
	if isinstance(value, bool):
		raise InvoiceDataError(f"{what} must be a number, got {value!r}")
	try:
		number = float(value)
	except (TypeError, ValueError):
		raise InvoiceDataError(f"{what} must be a number, got {value!r}") from None
	if not math.isfinite(number):
		raise InvoiceDataError(f"{what} must be a finite number, got {value!r}")
	return number


@dataclass(frozen=True)
class LineItem:
	"""One billable row. Position in Invoice.items is its only identity."""

	description: str
	quantity: float | Decimal = 1
	rate: float | Decimal = 0.0

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "LineItem":
		return cls(
			description=str(data.get("description", data.get("item", "")) or ""),
			quantity=_number(data.get("quantity", data.get("qty")), "quantity", default=1),
			rate=_number(data.get("rate"), "rate"),
		)


@dataclass(frozen=True)
class Invoice:
	id: str
	issuer: str = ""
	recipient: str = ""
	date: str = ""
	due: Optional[str] = None
	title: str = "INVOICE"
	logo: Optional[str] = None
	currency: str = "USD"
	items: Sequence[LineItem] = field(default_factory=tuple)
	tax: float | Decimal = 0.0
	discount: float | Decimal = 0.0
	notes: str = ""
	notes_header: str = "Notes"

	def __post_init__(self) -> None:
		# Freeze the item order as given
		object.__setattr__(self, "items", tuple(self.items))

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Invoice":
		"""Build an Invoice from the import-file shape.

		``items`` is either a list of objects (description/quantity/rate) or a list
		of descriptions paired positionally with ``quantities`` and ``rates``.
		Missing quantities default to 1 and missing rates to 0.
		"""
		if not isinstance(data, dict):
			raise InvoiceDataError("invoice data must be an object")
		raw_items = data.get("items") or []
		if not isinstance(raw_items, list):
			raise InvoiceDataError("items must be a list")
		quantities = data.get("quantities") or []
		rates = data.get("rates") or []
		items: List[LineItem] = []
		for i, raw in enumerate(raw_items):
			if isinstance(raw, dict):
				items.append(LineItem.from_dict(raw))
				continue
			qty = quantities[i] if i < len(quantities) else None
			rate = rates[i] if i < len(rates) else None
			items.append(LineItem(
				description=str(raw),
				quantity=_number(qty, f"quantity #{i + 1}", default=1),
				rate=_number(rate, f"rate #{i + 1}"),
			))

		return cls(
			id=str(data.get("id", "") or ""),
			title=str(data.get("title") or "INVOICE"),
			logo=data.get("logo") or None,
			issuer=str(data.get("from", data.get("issuer", "")) or ""),
			recipient=str(data.get("to", data.get("recipient", "")) or ""),
			date=str(data.get("date", "") or ""),
			due=(str(data["due"]) if data.get("due") else None),
			currency=str(data.get("currency") or "USD"),
			items=tuple(items),
			tax=_number(data.get("tax"), "tax"),
			discount=_number(data.get("discount"), "discount"),
			notes=str(data.get("note", data.get("notes", "")) or ""),
			notes_header=str(data.get("notes_header") or "Notes"),
		)
