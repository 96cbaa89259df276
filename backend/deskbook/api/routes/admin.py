"""
Admin password check used by the floor plan editor before entering edit mode.
"""

from typing import Optional

from fastapi import APIRouter, Header, HTTPException, status

from deskbook.core.logging import get_logger
from deskbook.core.security import ADMIN_HEADER, is_admin_password_configured, verify_admin_secret
from deskbook.schemas.seat import AdminVerifyRequest, AdminVerifyResponse

logger = get_logger(__name__)
router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post("/verify", response_model=AdminVerifyResponse)
async def verify_admin(
    body: Optional[AdminVerifyRequest] = None,
    x_admin_secret: Optional[str] = Header(default=None, alias=ADMIN_HEADER),
):
    """Accepts the password in the admin header or the request body."""
    candidate = x_admin_secret or (body.password if body else None)
    logger.info(
        "admin_verification_attempt",
        using_header=bool(x_admin_secret),
        using_body=bool(body and body.password),
    )

    if not is_admin_password_configured():
        logger.warning("admin_password_not_configured")
        return AdminVerifyResponse(authorized=True, password_required=False)

    if verify_admin_secret(candidate):
        return AdminVerifyResponse(authorized=True, password_required=True)

    logger.warning("admin_verification_failed")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Password is not valid.",
    )
