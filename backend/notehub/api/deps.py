"""Request identity dependencies shared by the routers."""

import uuid

from fastapi import Header, HTTPException

from notehub.services.identity import resolve_authorization


def get_viewer_id(authorization: str | None = Header(default=None)) -> uuid.UUID | None:
    """The caller's user id, or None for a guest. Never rejects."""
    return resolve_authorization(authorization)


def require_user_id(authorization: str | None = Header(default=None)) -> uuid.UUID:
    user_id = resolve_authorization(authorization)
    if user_id is None:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id
