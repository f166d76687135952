"""
Admin Auth Router — /api/auth

Endpoints:
    POST /api/auth/login   — Exchange the admin password for a signed token
    GET  /api/auth/verify  — Check a token and report its expiry
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..auth import check_password, create_admin_token, require_admin
from ..exceptions import AdminAuthError
from ..schemas import LoginRequest, TokenResponse, TokenInfoResponse

logger = logging.getLogger("vcfolio.routers.auth")

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=TokenResponse)
def login(data: LoginRequest):
    """Return a bearer token for the administrator. 403 on a wrong password."""
    if not check_password(data.password):
        logger.warning("Failed admin login attempt")
        raise AdminAuthError("Invalid password")
    token, expires_at = create_admin_token()
    logger.info("Issued admin token expiring at %s", expires_at.isoformat())
    return TokenResponse(access_token=token, expires_at=expires_at)


@router.get("/verify", response_model=TokenInfoResponse)
def verify(claims: dict = Depends(require_admin)):
    """Validate the caller's token."""
    return TokenInfoResponse(
        subject=claims["sub"],
        expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
    )
