"""Unit tests for invoice arithmetic."""

from decimal import Decimal
from types import SimpleNamespace

from billing.services.totals import compute_totals


def item(quantity, price: str) -> SimpleNamespace:
    return SimpleNamespace(quantity=quantity, unit_price=Decimal(price))


def test_reference_example() -> None:
    totals = compute_totals([item(2, "50.00"), item(1, "25.50")], Decimal("10"))

    assert totals.line_totals == [Decimal("100.00"), Decimal("25.50")]
    assert totals.subtotal == Decimal("125.50")
    assert totals.tax_amount == Decimal("12.55")
    assert totals.total_amount == Decimal("138.05")


def test_sums_are_exact() -> None:
    # 0.1 + 0.2 drifts in binary floating point
    totals = compute_totals([item(1, "0.10"), item(1, "0.20")])

    assert totals.subtotal == Decimal("0.30")
    assert str(totals.total_amount) == "0.30"


def test_missing_tax_rate_is_zero() -> None:
    totals = compute_totals([item(3, "19.99")], None)

    assert totals.tax_rate == Decimal("0")
    assert totals.tax_amount == Decimal("0.00")
    assert totals.total_amount == Decimal("59.97")


def test_tax_rounds_half_up_to_the_cent() -> None:
    totals = compute_totals([item(1, "0.05")], Decimal("10"))

    assert totals.tax_amount == Decimal("0.01")
    assert totals.total_amount == Decimal("0.06")


def test_total_is_subtotal_plus_tax() -> None:
    totals = compute_totals([item(7, "13.37"), item(2, "0.99")], Decimal("8.25"))

    assert totals.subtotal == Decimal("95.57")
    assert totals.tax_amount == Decimal("7.88")
    assert totals.total_amount == totals.subtotal + totals.tax_amount
