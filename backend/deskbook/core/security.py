"""
Admin secret check for the seat editor.

There are no user accounts: booking is open to anyone, only seat layout changes
are guarded. When ADMIN_PASSWORD is empty every request is treated as admin.
"""

import hmac
from typing import Optional

from fastapi import Header, HTTPException, status

from deskbook.core.config import get_settings
from deskbook.core.logging import get_logger

logger = get_logger(__name__)

ADMIN_HEADER = "X-Admin-Secret"


def is_admin_password_configured() -> bool:
    return len(get_settings().ADMIN_PASSWORD) > 0


def verify_admin_secret(candidate: Optional[str]) -> bool:
    """Constant-time comparison against the configured password."""
    if not candidate:
        return False
    expected = get_settings().ADMIN_PASSWORD.encode("utf-8")
    return hmac.compare_digest(candidate.encode("utf-8"), expected)


async def require_admin(
    x_admin_secret: Optional[str] = Header(default=None, alias=ADMIN_HEADER),
) -> None:
    """FastAPI dependency guarding seat administration routes."""
    if not is_admin_password_configured():
        return

    if not verify_admin_secret(x_admin_secret):
        logger.warning("admin_check_failed", header_present=bool(x_admin_secret))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password for edit mode.",
        )
