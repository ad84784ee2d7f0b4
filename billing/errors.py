# billing/errors.py
"""
Error taxonomy shared by the ledger, the token issuer and the HTTP layer.

Each error carries the HTTP status it maps to and a stable ``code``; the
transport layer renders them without having to know the concrete class.
"""

from typing import Optional


class BillingError(Exception):
    status_code = 500
    code = "billing_error"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def details(self) -> Optional[str]:
        return str(self.cause) if self.cause is not None else None


# ---- 400 ----

class ValidationError(BillingError):
    status_code = 400
    code = "validation_error"


class EmptyItemSet(ValidationError):
    code = "empty_item_set"

    def __init__(self):
        super().__init__("An invoice must have at least one item")


class InvalidStatus(ValidationError):
    code = "invalid_status"

    def __init__(self, status):
        super().__init__(f"Invalid status: {status!r}")
        self.status = status


class MissingField(ValidationError):
    code = "missing_field"

    def __init__(self, fields):
        super().__init__(f"Missing required field(s): {', '.join(fields)}")
        self.fields = list(fields)


class AmountOutOfRange(ValidationError):
    code = "amount_out_of_range"

    def __init__(self, field, value):
        super().__init__(f"{field} {value} exceeds the largest storable amount")
        self.field = field


# ---- 401 / 403 ----

class AuthError(BillingError):
    status_code = 401
    code = "auth_error"


class MissingToken(AuthError):
    code = "missing_token"

    def __init__(self):
        super().__init__("Authorization token missing")


class MalformedToken(AuthError):
    code = "malformed_token"

    def __init__(self):
        super().__init__("Authorization header must be 'Bearer <token>'")


class InvalidOrExpiredToken(AuthError):
    status_code = 403
    code = "invalid_token"

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__("Invalid or expired token", cause)


class InvalidCredentials(AuthError):
    code = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid email or password")


# ---- 404 ----

class NotFound(BillingError):
    status_code = 404
    code = "not_found"


class InvoiceNotFound(NotFound):
    code = "invoice_not_found"

    def __init__(self, invoice_id):
        super().__init__(f"Invoice {invoice_id} not found")
        self.invoice_id = invoice_id


class ProfileNotFound(NotFound):
    code = "profile_not_found"

    def __init__(self):
        super().__init__("User profile not found")


# ---- 409 ----

class Conflict(BillingError):
    status_code = 409
    code = "conflict"


class AlreadyPaid(Conflict):
    code = "already_paid"

    def __init__(self, invoice_id):
        super().__init__(f"Invoice {invoice_id} is already paid")
        self.invoice_id = invoice_id


# ---- 500 ----

class PersistenceError(BillingError):
    status_code = 500
    code = "persistence_error"
