"""
Domain exceptions.

Endpoints translate these into a small fixed set of HTTP responses.
Messages here are safe to show to clients; detail belongs in the logs.
"""

from typing import Optional


class JournalError(Exception):
    """Base exception for all journal backend errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ConfigError(JournalError):
    """Required configuration is missing. Fatal at startup."""


class InvalidCredentials(JournalError):
    """Unknown identifier or wrong password (deliberately indistinguishable)."""

    def __init__(self, message: str = "Invalid email or password."):
        super().__init__(message, code="INVALID_CREDENTIALS")


# =============================================================================
# Token verification
# =============================================================================

class TokenError(JournalError):
    """Base class for token verification failures."""


class MalformedToken(TokenError):
    """Token could not be parsed at all."""

    def __init__(self, message: str = "Malformed token"):
        super().__init__(message, code="MALFORMED_TOKEN")


class InvalidSignature(TokenError):
    """Signature mismatch, tampering, or unexpected algorithm."""

    def __init__(self, message: str = "Invalid token signature"):
        super().__init__(message, code="INVALID_SIGNATURE")


class ExpiredToken(TokenError):
    """Token signature is valid but its expiry has passed."""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message, code="TOKEN_EXPIRED")


# =============================================================================
# Persistence
# =============================================================================

class StoreError(JournalError):
    """Persistence-layer failure."""

    def __init__(self, message: str = "Storage error", code: Optional[str] = None):
        super().__init__(message, code=code or "STORE_ERROR")


class DuplicateIdentity(StoreError):
    """The store's uniqueness constraint rejected a new identity."""

    def __init__(self, email: str):
        super().__init__(f"Identity already exists: {email}", code="DUPLICATE_IDENTITY")
        self.email = email
