"""
VCFolio Admin Authentication

A single administrator role. The admin logs in with the shared password
and receives a short-lived signed JWT; every mutating endpoint requires
it as a Bearer token.

Usage:
    from vcfolio.auth import require_admin

    @router.post("/things", dependencies=[Depends(require_admin)])
    def create_thing(...):
        ...
"""

import hmac
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from .config import get_settings
from .exceptions import AdminAuthError

logger = logging.getLogger("vcfolio.auth")

ADMIN_SUBJECT = "admin"

# auto_error=False so missing credentials go through AdminAuthError (403)
bearer_scheme = HTTPBearer(auto_error=False)


def check_password(password: str) -> bool:
    """Compare against ADMIN_PASSWORD in constant time."""
    expected = get_settings().ADMIN_PASSWORD
    return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))


def create_admin_token(now: Optional[datetime] = None) -> tuple[str, datetime]:
    """
    Issue a signed admin token.

    Returns:
        (encoded JWT, expiry as an aware UTC datetime)
    """
    settings = get_settings()
    issued_at = now or datetime.now(timezone.utc)
    expires_at = issued_at + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": ADMIN_SUBJECT,
        "iat": int(issued_at.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.TOKEN_ALGORITHM)
    return token, datetime.fromtimestamp(claims["exp"], tz=timezone.utc)


def decode_admin_token(token: str) -> dict:
    """
    Verify signature, expiry and subject of an admin token.

    Raises:
        AdminAuthError: token expired, tampered with, or not an admin token
    """
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.TOKEN_ALGORITHM])
    except ExpiredSignatureError:
        logger.info("Rejected expired admin token")
        raise AdminAuthError("Administrator token expired")
    except JWTError as e:
        logger.warning("Rejected invalid admin token: %s", e)
        raise AdminAuthError("Invalid administrator token")

    if claims.get("sub") != ADMIN_SUBJECT:
        raise AdminAuthError("Invalid administrator token")
    return claims


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """FastAPI dependency guarding mutating routes. Returns the token claims."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AdminAuthError()
    return decode_admin_token(credentials.credentials)
