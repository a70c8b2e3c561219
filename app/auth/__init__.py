"""
Authentication and session authorization.

Provides:
- Password hashing (Argon2id)
- JWT session token signing and verification
- The session gate and its FastAPI dependencies
- Register/authenticate credential flows
"""

from app.auth.jwt import (
    TokenCodec,
    SessionClaims,
)
from app.auth.password import PasswordHasher
from app.auth.service import CredentialService
from app.auth.dependencies import (
    Authorized,
    Rejected,
    authorize,
    get_current_identity,
    get_optional_identity,
)

__all__ = [
    # JWT
    "TokenCodec",
    "SessionClaims",
    # Password
    "PasswordHasher",
    # Flows
    "CredentialService",
    # Gate
    "Authorized",
    "Rejected",
    "authorize",
    "get_current_identity",
    "get_optional_identity",
]
