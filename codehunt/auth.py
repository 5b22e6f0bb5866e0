"""Access control for administrative endpoints."""

import secrets

from fastapi import Header, HTTPException, Request, status

from codehunt.logging_config import get_logger

logger = get_logger(__name__)

ADMIN_KEY_HEADER = "X-Admin-Key"


async def require_admin(
    request: Request,
    x_admin_key: str | None = Header(default=None, alias=ADMIN_KEY_HEADER),
) -> None:
    """Check the admin key when one is configured; no key configured means open."""
    expected = request.app.state.settings.admin_api_key
    if not expected:
        return
    if not x_admin_key or not secrets.compare_digest(x_admin_key, expected):
        logger.warning("admin_access_denied", path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin key required",
        )
