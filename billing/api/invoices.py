# billing/api/invoices.py

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from billing.api.deps import get_ledger, get_principal
from billing.models.auth import Principal
from billing.models.invoices import (
    InvoiceCreate,
    InvoiceCreated,
    InvoiceDetail,
    InvoiceOut,
    InvoicePage,
    PaymentIn,
    PaymentRecorded,
    StatusUpdate,
)
from billing.services.ledger import InvoiceLedger

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


@router.post("", response_model=InvoiceCreated, status_code=status.HTTP_201_CREATED)
def create_invoice(
    body: InvoiceCreate,
    principal: Principal = Depends(get_principal),
    ledger: InvoiceLedger = Depends(get_ledger),
) -> InvoiceCreated:
    """
    Create an invoice and its line items in one transaction.
    """
    return ledger.create_invoice(principal, body)


@router.get("", response_model=InvoicePage)
def list_invoices(
    # Kept as strings: junk values fall back to the defaults instead of a 400.
    page: Optional[str] = Query(default=None, description="1-based page number"),
    limit: Optional[str] = Query(default=None, description="Page size"),
    search: Optional[str] = Query(
        default=None,
        description="Case-insensitive match on invoice number or customer name",
    ),
    principal: Principal = Depends(get_principal),
    ledger: InvoiceLedger = Depends(get_ledger),
) -> InvoicePage:
    return ledger.list_invoices(principal, page=page, limit=limit, search=search)


@router.get("/{invoice_id}", response_model=InvoiceDetail)
def get_invoice(
    invoice_id: int,
    principal: Principal = Depends(get_principal),
    ledger: InvoiceLedger = Depends(get_ledger),
) -> InvoiceDetail:
    return ledger.get_invoice(principal, invoice_id)


@router.put("/{invoice_id}/status", response_model=InvoiceOut)
def update_invoice_status(
    invoice_id: int,
    body: StatusUpdate,
    principal: Principal = Depends(get_principal),
    ledger: InvoiceLedger = Depends(get_ledger),
) -> InvoiceOut:
    return ledger.update_status(principal, invoice_id, body.status)


@router.post("/{invoice_id}/pay", response_model=PaymentRecorded)
def pay_invoice(
    invoice_id: int,
    body: PaymentIn,
    principal: Principal = Depends(get_principal),
    ledger: InvoiceLedger = Depends(get_ledger),
) -> PaymentRecorded:
    """
    Record a payment and mark the invoice paid. A second payment on a paid
    invoice is rejected with 409.
    """
    return ledger.record_payment(principal, invoice_id, body)
