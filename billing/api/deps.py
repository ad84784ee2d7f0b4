# billing/api/deps.py
"""
Request dependencies: the ledger built at startup, and the tenant guard.

``get_principal`` is the only way a route learns which company it acts for;
no route reads ``company_id`` from the request body or query string.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from billing.models.auth import Principal
from billing.security.tokens import TokenIssuer, extract_bearer
from billing.services.ledger import InvoiceLedger


def get_ledger(request: Request) -> InvoiceLedger:
    return request.app.state.ledger


def get_issuer(request: Request) -> TokenIssuer:
    return request.app.state.ledger.issuer


def get_principal(
    authorization: Optional[str] = Header(default=None),
    issuer: TokenIssuer = Depends(get_issuer),
) -> Principal:
    token = extract_bearer(authorization)
    return issuer.verify(token)
