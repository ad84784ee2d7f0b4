# billing/__init__.py
"""
Multi-tenant billing backend: invoices, line items and payments scoped per
company, behind bearer-token authentication.

Run with:
    uvicorn app:app --reload
"""

__version__ = "0.1.0"
