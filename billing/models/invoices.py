# billing/models/invoices.py

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class InvoiceItemIn(BaseModel):
    item_name: str = Field(..., min_length=1)
    description: Optional[str] = None
    quantity: int = Field(..., gt=0, le=2 ** 31 - 1)
    unit_price: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)


class InvoiceCreate(BaseModel):
    invoice_number: str = Field(..., min_length=1)
    invoice_date: date = Field(default_factory=date.today)
    due_date: Optional[date] = None
    customer_name: str = Field(..., min_length=1)
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[str] = None
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, le=100, max_digits=5, decimal_places=2)
    notes: Optional[str] = None
    # Emptiness is checked by the ledger so it reports EmptyItemSet.
    items: List[InvoiceItemIn] = Field(default_factory=list)


class InvoiceCreated(BaseModel):
    invoice_id: int
    subtotal: Decimal
    tax_amount: Decimal
    total_amount: Decimal


class InvoiceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    created_by: int
    invoice_number: str
    invoice_date: date
    due_date: Optional[date] = None
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total_amount: Decimal
    notes: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None


class InvoiceItemOut(BaseModel):
    id: int
    invoice_id: int
    item_name: str
    description: Optional[str] = None
    quantity: int
    unit_price: Decimal
    total_price: Decimal


class InvoiceDetail(BaseModel):
    invoice: InvoiceOut
    items: List[InvoiceItemOut]


class InvoicePage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(..., alias="totalPages")
    data: List[InvoiceOut]


class StatusUpdate(BaseModel):
    status: Optional[str] = None


class PaymentIn(BaseModel):
    # Presence is checked by the ledger so it reports MissingField.
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=14, decimal_places=2)
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    reference_number: Optional[str] = None


class PaymentRecorded(BaseModel):
    invoice_id: int
    paid_amount: Decimal
    status: str
