# billing/services/totals.py
"""
Invoice arithmetic. Everything is ``Decimal``; binary floats never touch money.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
# Numeric(14, 2) columns hold at most 12 integer digits.
MAX_AMOUNT = Decimal(10) ** 12


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(quantity, unit_price: Decimal) -> Decimal:
    return to_cents(Decimal(quantity) * Decimal(unit_price))


@dataclass(frozen=True)
class InvoiceTotals:
    line_totals: List[Decimal]
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total_amount: Decimal


def compute_totals(items: Iterable, tax_rate: Optional[Decimal] = None) -> InvoiceTotals:
    """
    ``items`` is any iterable of objects with ``quantity`` and ``unit_price``.
    A missing tax rate counts as zero. Tax is rounded half-up to the cent.
    """
    rate = Decimal(tax_rate) if tax_rate is not None else Decimal("0")

    lines = [line_total(item.quantity, item.unit_price) for item in items]
    subtotal = to_cents(sum(lines, Decimal("0")))
    tax_amount = to_cents(subtotal * rate / HUNDRED)

    return InvoiceTotals(
        line_totals=lines,
        subtotal=subtotal,
        tax_rate=rate,
        tax_amount=tax_amount,
        total_amount=subtotal + tax_amount,
    )
