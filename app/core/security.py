"""Admin console access check.

The session service signs HS256 tokens with ``SECRET_KEY`` and the admin's
email as subject. This service never issues tokens, it only verifies them.
"""
from __future__ import annotations

from typing import Any, Dict

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.config import settings

ALGORITHM = "HS256"
ADMIN_SCHEME = HTTPBearer(auto_error=False)


def decode_token(token: str) -> Dict[str, Any]:
    return jwt.decode(
        token,
        settings.secret_key.get_secret_value(),
        algorithms=[ALGORITHM],
        options={"require": ["sub", "exp"]},
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(ADMIN_SCHEME),
) -> Dict[str, Any]:
    """Resolve the console admin behind the bearer token, or answer 401."""
    if creds is None or not creds.credentials:
        raise _unauthorized("Missing authorization token")
    try:
        claims = decode_token(creds.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")

    if str(claims["sub"]).strip().lower() != settings.admin_email.lower():
        raise _unauthorized("Token is not for the billing console admin")
    return {
        "email": settings.admin_email,
        "name": settings.admin_name,
        "role": "billing_admin",
    }
