# billing/db/engine.py

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from billing.errors import PersistenceError

logger = logging.getLogger(__name__)


def _connect_args(url: str, timeout: float) -> dict:
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        # timeout = how long to wait on a locked database file
        return {"timeout": timeout, "check_same_thread": False}
    if backend == "postgresql":
        return {
            "connect_timeout": max(1, int(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}",
        }
    return {}


def _casefold(value):
    return value.casefold() if isinstance(value, str) else value


def get_engine(url: str, timeout: float = 5.0, echo: bool = False) -> Engine:
    options = {}
    if make_url(url).database not in (None, "", ":memory:"):
        # in-memory SQLite uses a pool without a checkout timeout
        options["pool_timeout"] = timeout

    # echo=True if you want to see SQL printed in the terminal
    engine = create_engine(
        url,
        future=True,
        echo=echo,
        pool_pre_ping=True,
        connect_args=_connect_args(url, timeout),
        **options,
    )

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _register_functions(dbapi_connection, connection_record):
            dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)

    return engine


@contextmanager
def transaction(engine: Engine) -> Iterator[Connection]:
    """
    Scoped unit of work: commits when the block exits normally, rolls back on
    any exception, and always returns the connection to the pool.

    Store failures surface as ``PersistenceError`` with the driver error as
    the cause; ledger errors raised inside the block propagate unchanged
    (after the rollback).
    """
    try:
        with engine.begin() as conn:
            yield conn
    except (SQLAlchemyError, OverflowError) as exc:
        logger.exception("Transaction rolled back")
        raise PersistenceError("Database transaction failed", exc) from exc


@contextmanager
def connection(engine: Engine) -> Iterator[Connection]:
    """Read-only counterpart of ``transaction``."""
    try:
        with engine.connect() as conn:
            yield conn
    except (SQLAlchemyError, OverflowError) as exc:
        logger.exception("Database read failed")
        raise PersistenceError("Database query failed", exc) from exc
