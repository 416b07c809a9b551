"""Security utilities for JWT and password handling."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

DEFAULT_BCRYPT_ROUNDS = 10


@lru_cache
def get_password_context(rounds: int = DEFAULT_BCRYPT_ROUNDS) -> CryptContext:
    """Get a bcrypt context for the given cost factor."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def verify_password(
    plain_password: str,
    hashed_password: str,
    rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> bool:
    """Verify a password against a hash."""
    return get_password_context(rounds).verify(plain_password, hashed_password)


def get_password_hash(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password with a random salt."""
    return get_password_context(rounds).hash(password)


@dataclass(frozen=True)
class TokenClaims:
    """Verified identity claims carried by an access token."""

    user_id: int
    email: str


@dataclass(frozen=True)
class TokenVerification:
    """Outcome of verifying an access token: claims on success, a reason otherwise."""

    claims: TokenClaims | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the token was verified."""
        return self.claims is not None


def create_access_token(
    data: dict[str, Any],
    secret_key: str,
    algorithm: str = "HS256",
    expires_delta: timedelta = timedelta(hours=1),
) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Payload data to encode
        secret_key: Signing key
        algorithm: Signing algorithm
        expires_delta: Lifetime of the token

    Returns:
        Encoded JWT token
    """
    now = datetime.now(UTC)
    to_encode = data.copy()
    to_encode.update(
        {
            "exp": now + expires_delta,
            "iat": now,
            "type": "access",
        }
    )

    return jwt.encode(to_encode, secret_key, algorithm=algorithm)


def verify_access_token(
    token: str,
    secret_key: str,
    algorithm: str = "HS256",
) -> TokenVerification:
    """
    Decode and validate a JWT access token.

    Only claims from a token whose signature and expiry both check out are
    returned.

    Args:
        token: JWT token to verify
        secret_key: Signing key
        algorithm: Expected signing algorithm

    Returns:
        Verification result with claims, or with an error reason
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[algorithm])
    except ExpiredSignatureError:
        return TokenVerification(error="expired")
    except JWTError:
        return TokenVerification(error="invalid")

    if payload.get("type") != "access":
        return TokenVerification(error="invalid")

    subject = payload.get("sub")
    email = payload.get("email")
    if not isinstance(subject, str) or not isinstance(email, str):
        return TokenVerification(error="invalid")

    try:
        user_id = int(subject)
    except ValueError:
        return TokenVerification(error="invalid")

    return TokenVerification(claims=TokenClaims(user_id=user_id, email=email))
