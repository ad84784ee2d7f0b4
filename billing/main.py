# billing/main.py

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from billing.api.auth import router as auth_router
from billing.api.invoices import router as invoices_router
from billing.config import Settings, get_settings
from billing.db.engine import get_engine
from billing.errors import BillingError, PersistenceError
from billing.security.tokens import TokenIssuer
from billing.services.ledger import InvoiceLedger

logger = logging.getLogger(__name__)


def _error_body(error: str, code: str, details: Optional[str] = None) -> dict:
    return {"success": False, "error": error, "code": code, "details": details}


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(BillingError)
    async def billing_error_handler(request: Request, exc: BillingError):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.message, exc.code, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        )
        return JSONResponse(
            status_code=400,
            content=_error_body("Invalid request", "validation_error", details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail), "http_error", f"Status Code: {exc.status_code}"),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=_error_body("Internal server error", "internal_error", str(exc)),
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    engine = get_engine(settings.database_url, timeout=settings.db_timeout_seconds)
    issuer = TokenIssuer(
        settings.jwt_secret.get_secret_value(),
        algorithm=settings.jwt_algorithm,
        ttl=timedelta(hours=settings.token_ttl_hours),
    )

    app = FastAPI(
        title="Billing SaaS Backend",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.ledger = InvoiceLedger(engine, issuer)
    app.state.started_at = time.monotonic()

    @app.get("/")
    def root():
        return {"message": "Billing SaaS Backend is running"}

    @app.get("/health")
    def health_check():
        return {
            "status": "UP",
            "service": settings.service_name,
            "time": datetime.now(timezone.utc).isoformat(),
            "uptime_seconds": round(time.monotonic() - app.state.started_at, 3),
        }

    @app.get("/db-check")
    def db_check():
        try:
            app.state.ledger.ping()
        except PersistenceError as exc:
            raise HTTPException(
                status_code=503,
                detail=f"Database unavailable: {exc.details}",
            ) from exc
        return {"status": "connected"}

    app.include_router(auth_router)
    app.include_router(invoices_router)
    _register_error_handlers(app)

    logger.info("%s ready (store: %s)", settings.service_name, engine.url.render_as_string(hide_password=True))
    return app
