# billing/api/auth.py

from fastapi import APIRouter, Depends

from billing.api.deps import get_ledger, get_principal
from billing.models.auth import LoginIn, LoginOut, Principal
from billing.services.ledger import InvoiceLedger

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/auth/login", response_model=LoginOut)
def login(body: LoginIn, ledger: InvoiceLedger = Depends(get_ledger)) -> LoginOut:
    """
    Exchange email + password for a signed session token.
    """
    return ledger.authenticate(body.email, body.password)


@router.get("/protected")
def protected(principal: Principal = Depends(get_principal)) -> dict:
    return {"message": "Access granted", "user": principal.model_dump()}
