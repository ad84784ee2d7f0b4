# billing/services/accounts.py
"""
Provisioning of companies and login users, used by ``scripts/create_user.py``.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine

from billing.db.engine import transaction
from billing.db.schema import auth_users, companies, users
from billing.security.passwords import hash_password

logger = logging.getLogger(__name__)


def get_or_create_company(conn: Connection, name: str) -> int:
    company_id = conn.execute(
        select(companies.c.id).where(companies.c.name == name)
    ).scalar_one_or_none()
    if company_id is not None:
        return company_id
    return conn.execute(companies.insert().values(name=name)).inserted_primary_key[0]


def provision_user(
    engine: Engine,
    company_name: str,
    email: str,
    password: str,
    role: str = "admin",
    name: Optional[str] = None,
    rounds: int = 12,
    with_profile: bool = True,
) -> dict:
    """
    Create the company if needed, then the identity row and (unless
    ``with_profile`` is false) the profile row, in one transaction.
    """
    email = email.strip().lower()

    with transaction(engine) as conn:
        company_id = get_or_create_company(conn, company_name)
        conn.execute(
            auth_users.insert().values(
                email=email,
                password_hash=hash_password(password, rounds=rounds),
            )
        )
        user_id = None
        if with_profile:
            user_id = conn.execute(
                users.insert().values(email=email, name=name, role=role, company_id=company_id)
            ).inserted_primary_key[0]

    logger.info("Provisioned %s (user %s) in company %s", email, user_id, company_id)
    return {"company_id": company_id, "user_id": user_id, "email": email}
