# billing/services/ledger.py
"""
The invoice ledger: login, invoice creation, listing, lookup, status changes
and payments, all scoped to the caller's company.

Every tenant-scoped method takes the ``Principal`` explicitly and filters on
``principal.company_id``. An invoice that exists in another company is
reported exactly like one that does not exist.
"""

import logging
import math
from typing import List, Optional, Sequence

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.engine import Connection, Engine

from billing.db.engine import connection, transaction
from billing.db.schema import (
    INVOICE_STATUSES,
    auth_users,
    invoice_items,
    invoices,
    payments,
    users,
)
from billing.errors import (
    AlreadyPaid,
    AmountOutOfRange,
    EmptyItemSet,
    InvalidCredentials,
    InvalidStatus,
    InvoiceNotFound,
    MissingField,
    ProfileNotFound,
)
from billing.models.auth import LoginOut, Principal, UserOut
from billing.models.invoices import (
    InvoiceCreate,
    InvoiceCreated,
    InvoiceDetail,
    InvoiceItemIn,
    InvoiceItemOut,
    InvoiceOut,
    InvoicePage,
    PaymentIn,
    PaymentRecorded,
)
from billing.security.passwords import verify_password
from billing.security.tokens import TokenIssuer
from billing.services.totals import MAX_AMOUNT, compute_totals

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
PAID = "paid"
PAYMENT_REQUIRED_FIELDS = ("amount", "payment_date", "payment_method")
# Integer columns are 64-bit signed.
MAX_INT64 = 2 ** 63 - 1


def _positive_int(value, default: int) -> int:
    """Query-string friendly int parsing: anything unusable falls back to ``default``."""
    if value is None:
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if 1 <= number <= MAX_INT64 else default


def _storable_id(invoice_id) -> bool:
    return isinstance(invoice_id, int) and 1 <= invoice_id <= MAX_INT64


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _row_to_invoice(row) -> InvoiceOut:
    return InvoiceOut.model_validate(dict(row))


def _row_to_item(row) -> InvoiceItemOut:
    return InvoiceItemOut(
        id=row["id"],
        invoice_id=row["invoice_id"],
        item_name=row["item_name"],
        description=row["description"],
        quantity=row["quantity"],
        unit_price=row["unit_price"],
        total_price=row["total_price"],
    )


class InvoiceLedger:
    def __init__(self, engine: Engine, issuer: TokenIssuer):
        self.engine = engine
        self.issuer = issuer

    # ---- store probe ----

    def ping(self) -> None:
        with connection(self.engine) as conn:
            conn.execute(select(1)).scalar_one()

    # ---- auth ----

    def authenticate(self, email: str, password: str) -> LoginOut:
        """
        Resolve identity and profile in one query, check the password, and
        issue a token for the resulting principal.
        """
        normalized = (email or "").strip().lower()

        stmt = (
            select(
                auth_users.c.password_hash,
                users.c.id.label("user_id"),
                users.c.email.label("profile_email"),
                users.c.name,
                users.c.role,
                users.c.company_id,
            )
            .select_from(
                auth_users.outerjoin(
                    users, func.lower(users.c.email) == func.lower(auth_users.c.email)
                )
            )
            .where(func.lower(auth_users.c.email) == normalized)
        )

        with connection(self.engine) as conn:
            row = conn.execute(stmt).mappings().first()

        if row is None or not verify_password(password or "", row["password_hash"]):
            logger.warning("Failed login for %s", normalized)
            raise InvalidCredentials()

        if row["user_id"] is None:
            logger.warning("Login for %s has no user profile", normalized)
            raise ProfileNotFound()

        principal = Principal(
            user_id=row["user_id"],
            role=row["role"],
            company_id=row["company_id"],
        )
        token = self.issuer.issue(principal)
        logger.info("User %s logged in (company %s)", principal.user_id, principal.company_id)

        return LoginOut(
            token=token,
            user=UserOut(
                id=row["user_id"],
                email=row["profile_email"],
                name=row["name"],
                role=row["role"],
                company_id=row["company_id"],
            ),
        )

    # ---- invoices ----

    def create_invoice(self, principal: Principal, payload: InvoiceCreate) -> InvoiceCreated:
        if not payload.items:
            raise EmptyItemSet()

        totals = compute_totals(payload.items, payload.tax_rate)
        for field in ("subtotal", "total_amount"):
            value = getattr(totals, field)
            if value >= MAX_AMOUNT:
                raise AmountOutOfRange(field, value)

        header = {
            "company_id": principal.company_id,
            "created_by": principal.user_id,
            "invoice_number": payload.invoice_number,
            "invoice_date": payload.invoice_date,
            "due_date": payload.due_date,
            "customer_name": payload.customer_name,
            "customer_email": payload.customer_email,
            "customer_phone": payload.customer_phone,
            "subtotal": totals.subtotal,
            "tax_rate": totals.tax_rate,
            "tax_amount": totals.tax_amount,
            "total_amount": totals.total_amount,
            "notes": payload.notes,
        }

        with transaction(self.engine) as conn:
            result = conn.execute(invoices.insert().values(**header))
            invoice_id = result.inserted_primary_key[0]
            self._insert_items(conn, principal, invoice_id, payload.items, totals.line_totals)

        logger.info(
            "Created invoice %s (%s) for company %s: %d item(s), total %s",
            invoice_id,
            payload.invoice_number,
            principal.company_id,
            len(payload.items),
            totals.total_amount,
        )

        return InvoiceCreated(
            invoice_id=invoice_id,
            subtotal=totals.subtotal,
            tax_amount=totals.tax_amount,
            total_amount=totals.total_amount,
        )

    def _insert_items(
        self,
        conn: Connection,
        principal: Principal,
        invoice_id: int,
        items: Sequence[InvoiceItemIn],
        line_totals: Sequence,
    ) -> None:
        conn.execute(
            invoice_items.insert(),
            [
                {
                    "invoice_id": invoice_id,
                    "company_id": principal.company_id,
                    "item_name": item.item_name,
                    "description": item.description,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "total_price": total,
                }
                for item, total in zip(items, line_totals)
            ],
        )

    def _contains(self, column, term: str):
        """Case-insensitive substring match that also folds non-ASCII letters."""
        if self.engine.dialect.name == "sqlite":
            # SQLite lower()/LIKE only fold ASCII; casefold() is registered by get_engine
            return func.casefold(column).like(_like_pattern(term.casefold()), escape="\\")
        return column.ilike(_like_pattern(term), escape="\\")

    def list_invoices(
        self,
        principal: Principal,
        page=None,
        limit=None,
        search: Optional[str] = None,
    ) -> InvoicePage:
        """
        Newest first (descending id). ``total`` counts every match, not just
        the returned page.
        """
        page = _positive_int(page, DEFAULT_PAGE)
        limit = _positive_int(limit, DEFAULT_LIMIT)
        if (page - 1) * limit > MAX_INT64:
            page, limit = DEFAULT_PAGE, DEFAULT_LIMIT

        conditions = [invoices.c.company_id == principal.company_id]
        term = (search or "").strip()
        if term:
            conditions.append(
                or_(
                    self._contains(invoices.c.invoice_number, term),
                    self._contains(invoices.c.customer_name, term),
                )
            )
        base_where = and_(*conditions)

        with connection(self.engine) as conn:
            count_stmt = select(func.count()).select_from(invoices).where(base_where)
            total = conn.execute(count_stmt).scalar_one()

            stmt = (
                select(invoices)
                .where(base_where)
                .order_by(invoices.c.id.desc())
                .limit(limit)
                .offset((page - 1) * limit)
            )
            rows = conn.execute(stmt).mappings().all()

        return InvoicePage(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
            data=[_row_to_invoice(row) for row in rows],
        )

    def get_invoice(self, principal: Principal, invoice_id: int) -> InvoiceDetail:
        if not _storable_id(invoice_id):
            raise InvoiceNotFound(invoice_id)

        with connection(self.engine) as conn:
            row = conn.execute(
                select(invoices).where(
                    invoices.c.id == invoice_id,
                    invoices.c.company_id == principal.company_id,
                )
            ).mappings().first()

            if row is None:
                raise InvoiceNotFound(invoice_id)

            item_rows = conn.execute(
                select(invoice_items)
                .where(
                    invoice_items.c.invoice_id == invoice_id,
                    invoice_items.c.company_id == principal.company_id,
                )
                .order_by(invoice_items.c.id)
            ).mappings().all()

        items: List[InvoiceItemOut] = [_row_to_item(r) for r in item_rows]
        return InvoiceDetail(invoice=_row_to_invoice(row), items=items)

    def update_status(self, principal: Principal, invoice_id: int, status) -> InvoiceOut:
        """
        Any of the four statuses may follow any other, ``paid`` included.
        """
        if not isinstance(status, str) or status not in INVOICE_STATUSES:
            raise InvalidStatus(status)
        if not _storable_id(invoice_id):
            raise InvoiceNotFound(invoice_id)

        scope = and_(
            invoices.c.id == invoice_id,
            invoices.c.company_id == principal.company_id,
        )

        with transaction(self.engine) as conn:
            result = conn.execute(update(invoices).where(scope).values(status=status))
            if result.rowcount == 0:
                raise InvoiceNotFound(invoice_id)
            row = conn.execute(select(invoices).where(scope)).mappings().one()

        logger.info(
            "Invoice %s of company %s set to %s by user %s",
            invoice_id,
            principal.company_id,
            status,
            principal.user_id,
        )
        return _row_to_invoice(row)

    def record_payment(
        self, principal: Principal, invoice_id: int, payload: PaymentIn
    ) -> PaymentRecorded:
        """
        Mark the invoice paid and store the payment in one transaction.

        The status flip is a compare-and-set on ``status != 'paid'``, so when
        two payments race on the same invoice the store lets exactly one of
        them through. The amount is recorded as given; it is not compared
        with the invoice total.
        """
        missing = []
        for name in PAYMENT_REQUIRED_FIELDS:
            value = getattr(payload, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        if missing:
            raise MissingField(missing)
        if not _storable_id(invoice_id):
            raise InvoiceNotFound(invoice_id)

        scope = and_(
            invoices.c.id == invoice_id,
            invoices.c.company_id == principal.company_id,
        )

        with transaction(self.engine) as conn:
            result = conn.execute(
                update(invoices)
                .where(scope, invoices.c.status != PAID)
                .values(status=PAID)
            )
            if result.rowcount == 0:
                current = conn.execute(select(invoices.c.status).where(scope)).first()
                if current is None:
                    raise InvoiceNotFound(invoice_id)
                raise AlreadyPaid(invoice_id)

            conn.execute(
                payments.insert().values(
                    invoice_id=invoice_id,
                    company_id=principal.company_id,
                    amount=payload.amount,
                    payment_date=payload.payment_date,
                    payment_method=payload.payment_method,
                    reference_number=payload.reference_number,
                )
            )

        logger.info(
            "Recorded payment of %s on invoice %s (company %s)",
            payload.amount,
            invoice_id,
            principal.company_id,
        )
        return PaymentRecorded(invoice_id=invoice_id, paid_amount=payload.amount, status=PAID)
