"""Resolve a bearer credential into an optional user id.

Tokens are issued elsewhere; this module only verifies them. A missing,
malformed, expired or otherwise invalid token resolves to ``None`` (guest)
and never raises.
"""

import logging
import os
import uuid

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

# Claims checked in order; issuers disagree on which one carries the user id.
_USER_ID_CLAIMS = ("userId", "id", "user", "sub")


def _secret() -> str:
    return os.environ.get("JWT_SECRET", "dev-secret-change-me")


def _algorithm() -> str:
    return os.environ.get("JWT_ALGORITHM", "HS256")


def resolve_token(token: str | None) -> uuid.UUID | None:
    """Return the user id carried by *token*, or None for a guest."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, _secret(), algorithms=[_algorithm()])
    except JWTError:
        logger.debug("Ignoring invalid bearer token")
        return None
    for claim in _USER_ID_CLAIMS:
        value = payload.get(claim)
        if value is None:
            continue
        try:
            return uuid.UUID(str(value))
        except ValueError:
            return None
    return None


def resolve_authorization(header: str | None) -> uuid.UUID | None:
    """Resolve an ``Authorization`` header value of the form ``Bearer <token>``."""
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return resolve_token(token.strip())


def issue_token(user_id: uuid.UUID) -> str:
    """Sign a token for *user_id*. Used by tests and local tooling."""
    return jwt.encode({"userId": str(user_id)}, _secret(), algorithm=_algorithm())
