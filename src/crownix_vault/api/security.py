# Crownix Vault - API Session Token
#
# The local backend mints one random token per process. The desktop
# frontend receives it at launch and sends it back as X-Session-Token;
# any other local process calling the API without it is rejected.

import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

SESSION_HEADER = "X-Session-Token"

_SESSION_TOKEN: Optional[str] = None


def initialize_session_token() -> str:
    """Mint a fresh 256-bit token for this backend instance and return it."""
    global _SESSION_TOKEN
    _SESSION_TOKEN = secrets.token_urlsafe(32)
    return _SESSION_TOKEN


def get_session_token() -> str:
    if _SESSION_TOKEN is None:
        raise RuntimeError("Session token not initialized. Call initialize_session_token() first.")
    return _SESSION_TOKEN


async def verify_session_token(
    x_session_token: Optional[str] = Header(None, alias=SESSION_HEADER),
) -> str:
    """
    FastAPI dependency guarding every vault route.

    Raises:
        HTTPException: 503 before a token exists, 401 when the header is
            missing or does not match (constant-time comparison).
    """
    if _SESSION_TOKEN is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session token not initialized"
        )

    if not x_session_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {SESSION_HEADER} header"
        )

    if not secrets.compare_digest(x_session_token, _SESSION_TOKEN):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token"
        )

    return x_session_token
