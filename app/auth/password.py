"""
Password hashing with Argon2id.

Argon2id is memory-hard and side-channel resistant. Each hash embeds its
own random salt and cost parameters, so verify() needs nothing but the
stored string.

Hashing failures (HashingError, MemoryError) are not caught here: they
mean the request cannot be served, not that the password was wrong.
"""

from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError

# Cost parameters, fixed for the life of the process
TIME_COST = 3            # Number of iterations
MEMORY_COST = 65536      # 64 MB memory usage
PARALLELISM = 4          # Number of parallel threads
HASH_LEN = 32            # Length of the hash in bytes
SALT_LEN = 16            # Length of the random salt


class PasswordHasher:
    """One-way, salted, adaptive-cost credential transform."""

    def __init__(
        self,
        time_cost: int = TIME_COST,
        memory_cost: int = MEMORY_COST,
        parallelism: int = PARALLELISM,
    ):
        self._ph = Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            hash_len=HASH_LEN,
            salt_len=SALT_LEN,
        )

    def hash(self, password: str) -> str:
        """
        Hash a password using Argon2id.

        Returns:
            The encoded hash string (algorithm, params, salt and digest)
        """
        return self._ph.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Verify a password against its hash in constant time.

        Returns:
            True if password matches, False on mismatch or malformed hash
        """
        if not password_hash:
            return False
        try:
            return self._ph.verify(password_hash, password)
        except VerificationError:
            # Includes VerifyMismatchError
            return False
        except (InvalidHashError, UnicodeError):
            # Not an argon2 hash, or not ASCII
            return False

