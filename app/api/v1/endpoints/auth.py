"""
Authentication endpoints.

Provides:
- Signup (form → stored credential record)
- Login (email/password → session cookie)
- Logout (clears the cookie only; tokens stay valid until expiry)
- Current session info
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from app.auth.dependencies import (
    SESSION_COOKIE,
    get_client_ip,
    get_credential_service,
    get_current_identity,
)
from app.auth.jwt import SessionClaims
from app.auth.service import CredentialService
from app.core.exceptions import DuplicateIdentity, InvalidCredentials, StoreError
from app.schemas.auth import SessionInfo

logger = logging.getLogger(__name__)

router = APIRouter()

LOGIN_PAGE = "/login2.html"
ENTRY_PAGE = "/entry2.html"


@router.post("/signup")
async def signup(
    username: Annotated[str, Form()],
    email: Annotated[str, Form()],
    psw: Annotated[str, Form()],
    service: CredentialService = Depends(get_credential_service),
):
    """Register a new account and send the browser to the login page."""
    try:
        user_id = await service.register(email=email, username=username, password=psw)
    except DuplicateIdentity:
        logger.info("Signup rejected: email already registered")
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists.",
        )
    except StoreError as e:
        logger.error("Error saving user: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error saving user.",
        )

    logger.info("User saved successfully: %s", user_id)
    return RedirectResponse(LOGIN_PAGE, status_code=status.HTTP_303_SEE_OTHER)


@router.post("/login")
async def login(
    request: Request,
    uname: Annotated[str, Form()],
    psw: Annotated[str, Form()],
    service: CredentialService = Depends(get_credential_service),
):
    """
    Authenticate and set the session cookie.

    The cookie is HttpOnly, SameSite=Lax, and Secure in production.
    Unknown email and wrong password get the same 401.
    """
    try:
        token = await service.authenticate(email=uname, password=psw)
    except InvalidCredentials as e:
        logger.info("Invalid email or password from %s", get_client_ip(request))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message)
    except StoreError as e:
        logger.error("Error logging in: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error logging in.",
        )

    settings = request.app.state.settings
    response = RedirectResponse(ENTRY_PAGE, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.token_ttl_minutes * 60,
    )
    logger.info("User logged in successfully from %s", get_client_ip(request))
    return response


@router.post("/logout")
async def logout(request: Request):
    """
    Clear the session cookie.

    Note: JWTs cannot be invalidated server-side here. A copied token
    stays usable until it expires.
    """
    response = RedirectResponse(LOGIN_PAGE, status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(
        SESSION_COOKIE,
        httponly=True,
        secure=request.app.state.settings.is_production,
        samesite="lax",
    )
    return response


@router.get("/me", response_model=SessionInfo)
async def get_current_session(
    identity: SessionClaims = Depends(get_current_identity),
):
    """Get the identity recovered from the current session token."""
    return SessionInfo(id=identity.user_id, username=identity.name, expires_at=identity.exp)
