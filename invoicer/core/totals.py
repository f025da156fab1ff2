"""
Derived invoice amounts. Nothing here is cached or written back to the invoice;
every render recomputes a fresh Totals value.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from invoicer.core.currency import sum_money, to_decimal
from invoicer.data.models import Invoice, LineItem

SUBTOTAL_LABEL = "Subtotal"
TAX_LABEL = "Tax"
DISCOUNT_LABEL = "Discount"
TOTAL_LABEL = "Total"


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


def line_total(item: LineItem) -> Decimal:
    return to_decimal(item.quantity) * to_decimal(item.rate)


def compute_subtotal(items: Iterable[LineItem]) -> Decimal:
    """Sum of quantity x rate over all items; 0 for an empty list."""
    return sum_money(line_total(item) for item in items)


def compute_total(
    subtotal: float | Decimal,
    tax: Optional[float | Decimal] = 0,
    discount: Optional[float | Decimal] = 0,
) -> Decimal:
    """subtotal + tax - discount. Tax and discount are absolute amounts.

    Negative results are returned as-is.
    """
    return to_decimal(subtotal) + to_decimal(tax or 0) - to_decimal(discount or 0)


def compute_totals(invoice: Invoice) -> Totals:
    subtotal = compute_subtotal(invoice.items)
    tax = to_decimal(invoice.tax or 0)
    discount = to_decimal(invoice.discount or 0)
    return Totals(
        subtotal=subtotal,
        tax=tax,
        discount=discount,
        total=compute_total(subtotal, tax, discount),
    )


def totals_lines(totals: Totals) -> List[Tuple[str, Decimal, bool]]:
    """Rows of the totals band as (label, amount, emphasized).

    Subtotal and Total always appear; Tax and Discount only when positive.
    """
    lines: List[Tuple[str, Decimal, bool]] = [(SUBTOTAL_LABEL, totals.subtotal, False)]
    if totals.tax > 0:
        lines.append((TAX_LABEL, totals.tax, False))
    if totals.discount > 0:
        lines.append((DISCOUNT_LABEL, totals.discount, False))
    lines.append((TOTAL_LABEL, totals.total, True))
    return lines
