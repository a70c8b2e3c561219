"""
JWT session tokens.

Security measures:
- Single pinned algorithm (HS256); tokens whose header names any other
  algorithm, including "none", are rejected before signature checks
- Secret injected at construction, never read from ambient globals
- Fixed TTL, checked against an injectable clock
- Stateless: nothing is stored server-side
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from jose import jwt, JWTError
from jose.exceptions import JWTClaimsError
from pydantic import BaseModel, ValidationError, field_validator

from app.core.exceptions import ExpiredToken, InvalidSignature, MalformedToken

JWT_ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(hours=1)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionClaims(BaseModel):
    """JWT token payload structure."""
    sub: str                          # User ID (subject)
    name: str                         # Display name
    iat: Optional[datetime] = None    # Issued at
    exp: Optional[datetime] = None    # Expiration

    @field_validator("sub")
    @classmethod
    def numeric_subject(cls, v: str) -> str:
        # Canonical decimal form of the user id
        return str(int(v))

    @property
    def user_id(self) -> int:
        return int(self.sub)


class TokenCodec:
    """Signs SessionClaims into a JWT and verifies it back."""

    def __init__(
        self,
        secret: str,
        ttl: timedelta = DEFAULT_TTL,
        clock: Clock = utc_now,
    ):
        if not secret:
            raise ValueError("TokenCodec requires a signing secret")
        self._secret = secret
        self.ttl = ttl
        self._clock = clock
        self.algorithm = JWT_ALGORITHM

    def sign(self, user_id: int, name: str, ttl: Optional[timedelta] = None) -> str:
        """
        Create a signed session token.

        Args:
            user_id: The user's database ID
            name: Display name carried in the token
            ttl: Lifetime override; defaults to the codec's TTL

        Returns:
            Encoded JWT string (URL and cookie safe)
        """
        now = self._clock()
        payload = {
            "sub": str(user_id),
            "name": name,
            "iat": now,
            "exp": now + (ttl if ttl is not None else self.ttl),
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> SessionClaims:
        """
        Verify and decode a session token.

        Raises:
            MalformedToken: If the token cannot be parsed
            InvalidSignature: If the signature or algorithm does not match
            ExpiredToken: If the current time is at or past the expiry
        """
        try:
            header = jwt.get_unverified_header(token)
            # Payload must decode to a JSON object too
            jwt.get_unverified_claims(token)
        except (JWTError, AttributeError, TypeError) as e:
            raise MalformedToken(str(e)) from e

        if header.get("alg") != self.algorithm:
            raise InvalidSignature(f"Unexpected algorithm: {header.get('alg')!r}")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                # Expiry is checked below against our own clock
                options={"verify_exp": False},
            )
        except JWTClaimsError as e:
            raise MalformedToken(str(e)) from e
        except JWTError as e:
            raise InvalidSignature(str(e)) from e

        claims = self._to_claims(payload)
        if self._clock() >= claims.exp:
            raise ExpiredToken()
        return claims

    @staticmethod
    def _to_claims(payload: dict[str, Any]) -> SessionClaims:
        try:
            claims = SessionClaims(
                sub=payload["sub"],
                name=payload.get("name", ""),
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError, OverflowError, ValidationError) as e:
            raise MalformedToken(f"Invalid claims: {e}") from e
        return claims
