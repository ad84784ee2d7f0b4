"""Shared fixtures: a throwaway SQLite store with two tenants."""

from collections.abc import Callable, Generator
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.engine import Engine

from billing.config import Settings
from billing.db.engine import get_engine
from billing.db.schema import metadata
from billing.models.auth import Principal
from billing.models.invoices import InvoiceCreate, InvoiceItemIn
from billing.security.tokens import TokenIssuer
from billing.services.accounts import provision_user
from billing.services.ledger import InvoiceLedger

SECRET = "test-signing-secret-0123456789abcdef"
PASSWORD = "correct horse battery staple"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a per-test SQLite file."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'billing.db'}",
        jwt_secret=SECRET,
        bcrypt_rounds=4,
        log_level="DEBUG",
    )


@pytest.fixture
def engine(settings: Settings) -> Generator[Engine, None, None]:
    """Engine with the schema created."""
    engine = get_engine(settings.database_url, timeout=settings.db_timeout_seconds)
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def issuer() -> TokenIssuer:
    return TokenIssuer(SECRET)


@pytest.fixture
def ledger(engine: Engine, issuer: TokenIssuer) -> InvoiceLedger:
    return InvoiceLedger(engine, issuer)


@pytest.fixture
def accounts(engine: Engine) -> dict:
    """Two companies with one user each."""
    return {
        "acme": provision_user(
            engine, "Acme", "alice@acme.io", PASSWORD, role="admin", name="Alice", rounds=4
        ),
        "globex": provision_user(
            engine, "Globex", "bob@globex.io", PASSWORD, role="staff", name="Bob", rounds=4
        ),
    }


@pytest.fixture
def principal_a(accounts: dict) -> Principal:
    acme = accounts["acme"]
    return Principal(user_id=acme["user_id"], role="admin", company_id=acme["company_id"])


@pytest.fixture
def principal_b(accounts: dict) -> Principal:
    globex = accounts["globex"]
    return Principal(user_id=globex["user_id"], role="staff", company_id=globex["company_id"])


@pytest.fixture
def make_invoice() -> Callable[..., InvoiceCreate]:
    """Factory for invoice payloads; defaults to the 125.50 / 10% example."""

    def _make(
        invoice_number: str = "INV-0001",
        customer_name: str = "Wayne Enterprises",
        tax_rate=Decimal("10"),
        items=None,
    ) -> InvoiceCreate:
        if items is None:
            items = [
                InvoiceItemIn(item_name="Consulting", quantity=2, unit_price=Decimal("50.00")),
                InvoiceItemIn(item_name="Hosting", quantity=1, unit_price=Decimal("25.50")),
            ]
        return InvoiceCreate(
            invoice_number=invoice_number,
            invoice_date=date(2026, 10, 1),
            due_date=date(2026, 10, 31),
            customer_name=customer_name,
            customer_email="ap@wayne.io",
            tax_rate=tax_rate,
            items=items,
        )

    return _make
