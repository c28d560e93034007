from __future__ import annotations

import hmac
import logging

from fastapi import Header, HTTPException

from backend.settings import get_settings

logger = logging.getLogger(__name__)


def _token_matches(candidate: str | None, expected: str) -> bool:
    return bool(candidate) and hmac.compare_digest(candidate.encode(), expected.encode())


async def require_user_email(
    x_user_email: str | None = Header(default=None, alias="X-User-Email"),
    x_backend_token: str | None = Header(default=None, alias="X-Backend-Token"),
) -> str:
    """Resolve the account that owns every row touched by the request.

    The dashboard is the only caller: it proves itself with the shared backend
    secret and names the logged-in account in ``X-User-Email``.
    """
    settings = get_settings()
    if not _token_matches(x_backend_token, settings.backend_session_secret):
        raise HTTPException(status_code=401, detail="Invalid backend token")
    email = (x_user_email or "").strip().lower()
    if not email:
        raise HTTPException(status_code=401, detail="Missing user email")
    allowed = settings.allowed_emails
    if allowed and email not in allowed:
        logger.warning("Rejected request for account %s", email)
        raise HTTPException(status_code=403, detail="User not allowed")
    return email
