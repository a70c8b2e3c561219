"""
Session gate and FastAPI dependencies for authentication.

Provides:
- authorize: pure gate function, token -> Authorized | Rejected
- get_current_identity: dependency that runs the gate on the session cookie
- get_credential_service / get_journal_store: per-request collaborators
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.jwt import SessionClaims, TokenCodec
from app.auth.service import CredentialService
from app.core.database import get_db
from app.core.exceptions import TokenError
from app.core.store import SqlIdentityStore, SqlJournalStore

logger = logging.getLogger(__name__)

SESSION_COOKIE = "token"

NO_TOKEN_DETAIL = "Access denied. No token provided."
INVALID_TOKEN_DETAIL = "Invalid or expired session."


@dataclass(frozen=True)
class Authorized:
    identity: SessionClaims


@dataclass(frozen=True)
class Rejected:
    status_code: int
    detail: str


GateResult = Union[Authorized, Rejected]


def authorize(token: Optional[str], codec: TokenCodec) -> GateResult:
    """
    Decide whether a request carrying `token` may proceed.

    No token -> 401 without touching the codec. Any verification failure
    (malformed, bad signature, expired) -> 403 with one generic message.
    """
    if not token:
        return Rejected(status.HTTP_401_UNAUTHORIZED, NO_TOKEN_DETAIL)

    try:
        claims = codec.verify(token)
    except TokenError as e:
        logger.info("Rejected session token: %s", e.code)
        return Rejected(status.HTTP_403_FORBIDDEN, INVALID_TOKEN_DETAIL)

    return Authorized(claims)


def get_token_codec(request: Request) -> TokenCodec:
    return request.app.state.token_codec


async def get_current_identity(
    request: Request,
    codec: TokenCodec = Depends(get_token_codec),
) -> SessionClaims:
    """
    Run the session gate against the `token` cookie.

    Raises:
        HTTPException 401: If no token is present
        HTTPException 403: If the token is invalid or expired
    """
    result = authorize(request.cookies.get(SESSION_COOKIE), codec)
    if isinstance(result, Rejected):
        raise HTTPException(status_code=result.status_code, detail=result.detail)

    request.state.identity = result.identity
    return result.identity


async def get_optional_identity(
    request: Request,
    codec: TokenCodec = Depends(get_token_codec),
) -> Optional[SessionClaims]:
    """
    Like get_current_identity, but returns None instead of rejecting.
    Useful for endpoints that work differently for anonymous users.
    """
    result = authorize(request.cookies.get(SESSION_COOKIE), codec)
    if isinstance(result, Authorized):
        return result.identity
    return None


def get_credential_service(
    request: Request,
    db: AsyncSession = Depends(get_db),
    codec: TokenCodec = Depends(get_token_codec),
) -> CredentialService:
    settings = request.app.state.settings
    store = SqlIdentityStore(db, timeout=settings.store_timeout_seconds)
    return CredentialService(store=store, hasher=request.app.state.password_hasher, codec=codec)


def get_journal_store(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> SqlJournalStore:
    return SqlJournalStore(db, timeout=request.app.state.settings.store_timeout_seconds)


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.
    Handles X-Forwarded-For header for proxied requests.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take the first IP (original client)
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return "unknown"
