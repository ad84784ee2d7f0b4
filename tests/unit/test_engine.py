"""Unit tests for the store helpers."""

import pytest
from sqlalchemy import func, select

from billing.db.engine import connection, transaction
from billing.db.schema import invoices
from billing.errors import InvoiceNotFound, PersistenceError


def test_driver_overflow_is_persistence_error(engine) -> None:
    """Integers past 64 bits fail in the driver, not in SQLAlchemy."""
    with pytest.raises(PersistenceError) as exc_info:
        with connection(engine) as conn:
            conn.execute(select(invoices).where(invoices.c.id == 10 ** 20)).first()

    assert isinstance(exc_info.value.cause, OverflowError)


def test_transaction_converts_overflow(engine) -> None:
    with pytest.raises(PersistenceError):
        with transaction(engine):
            raise OverflowError("Python int too large to convert to SQLite INTEGER")


def test_ledger_errors_pass_through(engine) -> None:
    with pytest.raises(InvoiceNotFound):
        with transaction(engine):
            raise InvoiceNotFound(1)


def test_casefold_is_available_on_sqlite(engine) -> None:
    with connection(engine) as conn:
        folded = conn.execute(select(func.casefold("ÉCOLE Straße"))).scalar_one()

    assert folded == "école strasse"
