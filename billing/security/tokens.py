# billing/security/tokens.py
"""
Signed session tokens.

A token carries the authenticated principal (``user_id``, ``role``,
``company_id``) and an expiry. Verification never goes back to the store:
whatever was signed at login is what the request runs as.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import ValidationError as PayloadError

from billing.errors import InvalidOrExpiredToken, MalformedToken, MissingToken
from billing.models.auth import Principal

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def extract_bearer(authorization: Optional[str]) -> str:
    """Pull the token out of an ``Authorization: Bearer <token>`` header value."""
    if authorization is None or not authorization.strip():
        raise MissingToken()

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
        raise MalformedToken()
    return parts[1]


class TokenIssuer:
    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(hours=24)):
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = ttl

    def issue(self, principal: Principal, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        claims = principal.model_dump()
        claims["iat"] = now
        claims["exp"] = now + self.ttl
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: Optional[str]) -> Principal:
        if not token:
            raise MissingToken()

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp"]},
            )
            return Principal(
                user_id=claims["user_id"],
                role=claims["role"],
                company_id=claims["company_id"],
            )
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected token: %s", exc)
            raise InvalidOrExpiredToken(exc) from exc
        except (KeyError, PayloadError) as exc:
            logger.info("Rejected token with unexpected payload: %s", exc)
            raise InvalidOrExpiredToken(exc) from exc
