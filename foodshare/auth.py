"""
Request identity helpers.

Recipient sessions are identified by an opaque X-Session-Id header that
selects their basket namespace; admin endpoints require X-Admin-Key.
"""

from __future__ import annotations

import os
import re
import secrets

from fastapi import Header, HTTPException

from foodshare.errors import ERROR_SESSION_REQUIRED, ERROR_UNAUTHORIZED
from foodshare.logging import get_logger, sanitize_session_for_logging

logger = get_logger(__name__)

_SESSION_ID_RE = re.compile(r"^[A-Za-z0-9_-]{8,128}$")


async def get_session_id(
    x_session_id: str = Header(None, alias="X-Session-Id")
) -> str:
    """Basket namespace for the calling recipient."""
    if not x_session_id:
        raise HTTPException(status_code=400, detail=ERROR_SESSION_REQUIRED)
    if not _SESSION_ID_RE.match(x_session_id):
        logger.warning("Rejected malformed session id %s", sanitize_session_for_logging(x_session_id))
        raise HTTPException(status_code=400, detail="Invalid X-Session-Id")
    return x_session_id


async def verify_admin(
    x_admin_key: str = Header(None, alias="X-Admin-Key")
) -> bool:
    """
    Verify ADMIN_API_KEY for admin endpoints.

    Read per request so the key can be rotated without a restart.
    """
    admin_key = os.environ.get("ADMIN_API_KEY", "")

    if not admin_key:
        raise HTTPException(status_code=500, detail="ADMIN_API_KEY not configured")

    if not x_admin_key or not secrets.compare_digest(x_admin_key, admin_key):
        raise HTTPException(status_code=401, detail=ERROR_UNAUTHORIZED)

    return True
