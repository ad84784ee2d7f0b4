# billing/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, Integer, String, Numeric, Date, DateTime,
    ForeignKey, CheckConstraint, Text, UniqueConstraint, func, text,
)

metadata = MetaData()

INVOICE_STATUSES = ("draft", "sent", "paid", "cancelled")

companies = Table(
    "companies",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False, unique=True),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)

# Identity (login) and profile (tenant membership) are kept apart.
auth_users = Table(
    "auth_users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String, nullable=False, unique=True),
    Column("password_hash", String, nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String, nullable=False, unique=True),
    Column("name", String, nullable=True),
    Column("role", String, nullable=False, server_default=text("'user'")),
    Column("company_id", Integer, ForeignKey("companies.id"), nullable=False, index=True),
)

invoices = Table(
    "invoices",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("company_id", Integer, ForeignKey("companies.id"), nullable=False, index=True),
    Column("created_by", Integer, ForeignKey("users.id"), nullable=False),
    Column("invoice_number", Text, nullable=False),
    Column("invoice_date", Date, nullable=False),
    Column("due_date", Date),
    Column("customer_name", Text, nullable=False),
    Column("customer_email", Text),
    Column("customer_phone", Text),
    Column("subtotal", Numeric(14, 2), nullable=False),
    Column("tax_rate", Numeric(5, 2), nullable=False, server_default=text("0")),
    Column("tax_amount", Numeric(14, 2), nullable=False),
    Column("total_amount", Numeric(14, 2), nullable=False),
    Column("notes", Text),
    Column("status", String(16), nullable=False, server_default=text("'draft'")),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    UniqueConstraint("company_id", "invoice_number", name="uq_invoices_company_number"),
    CheckConstraint(
        "status IN ('draft', 'sent', 'paid', 'cancelled')",
        name="ck_invoices_status",
    ),
    CheckConstraint("subtotal >= 0", name="ck_invoices_subtotal_nonneg"),
    CheckConstraint("tax_rate >= 0", name="ck_invoices_tax_rate_nonneg"),
)

invoice_items = Table(
    "invoice_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("invoice_id", Integer, ForeignKey("invoices.id"), nullable=False, index=True),
    Column("company_id", Integer, ForeignKey("companies.id"), nullable=False),
    Column("item_name", Text, nullable=False),
    Column("description", Text),
    Column("quantity", Integer, nullable=False),
    Column("unit_price", Numeric(14, 2), nullable=False),
    Column("total_price", Numeric(14, 2), nullable=False),
    CheckConstraint("quantity > 0", name="ck_invoice_items_quantity_pos"),
    CheckConstraint("unit_price >= 0", name="ck_invoice_items_unit_price_nonneg"),
)

payments = Table(
    "payments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("invoice_id", Integer, ForeignKey("invoices.id"), nullable=False, index=True),
    Column("company_id", Integer, ForeignKey("companies.id"), nullable=False),
    Column("amount", Numeric(14, 2), nullable=False),
    Column("payment_date", Date, nullable=False),
    Column("payment_method", Text, nullable=False),
    Column("reference_number", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint("amount > 0", name="ck_payments_amount_pos"),
)
