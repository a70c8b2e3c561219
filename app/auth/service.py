"""
Credential flows: register and authenticate.

Both flows sit on top of the password hasher, the identity store and the
token codec. Argon2 is CPU and memory heavy, so hashing runs in the
threadpool instead of on the event loop.
"""

import logging

from starlette.concurrency import run_in_threadpool

from app.auth.jwt import TokenCodec
from app.auth.password import PasswordHasher
from app.core.exceptions import InvalidCredentials
from app.core.store import IdentityStore

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


class CredentialService:
    """Turns credentials into stored records and records into session tokens."""

    def __init__(self, store: IdentityStore, hasher: PasswordHasher, codec: TokenCodec):
        self._store = store
        self._hasher = hasher
        self._codec = codec

    async def register(self, email: str, username: str, password: str) -> int:
        """
        Hash the password and insert a new credential record.

        No uniqueness pre-check is done here; the store's unique
        constraint decides and raises DuplicateIdentity.

        Returns:
            The new user's id

        Raises:
            DuplicateIdentity: If the email is already registered
            StoreError: If persistence fails for any other reason
        """
        password_hash = await run_in_threadpool(self._hasher.hash, password)
        user_id = await self._store.create_user(
            email=normalize_email(email),
            username=username,
            password_hash=password_hash,
        )
        logger.info("User %s registered", user_id)
        return user_id

    async def authenticate(self, email: str, password: str) -> str:
        """
        Check credentials and issue a session token.

        Unknown email and wrong password raise the same error so the
        response never reveals whether an account exists.

        Raises:
            InvalidCredentials: On any credential mismatch
            StoreError: If the lookup fails
        """
        record = await self._store.find_by_email(normalize_email(email))
        if record is None:
            raise InvalidCredentials()

        matches = await run_in_threadpool(self._hasher.verify, password, record.password_hash)
        if not matches:
            raise InvalidCredentials()

        return self._codec.sign(record.id, record.username)
