"""
Identity token utilities (JWT).

Authentication itself happens elsewhere: an external identity provider
verifies the user and issues a signed JWT whose "sub" claim is the user's
opaque identity. This API shares the provider's signing key (SECRET_KEY)
and only checks the signature and expiry; it never sees credentials.

  - decode_access_token(): used on every request (dependencies.py)
  - create_access_token(): mints tokens the way the provider does, for the
    test suite and the demo seed script
"""

from datetime import datetime, timedelta, timezone

from jose import jwt

from bitsplit.config import settings


DEFAULT_TOKEN_LIFETIME = timedelta(minutes=30)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """
    Create a signed JWT access token.

    Args:
        data: Claims to encode (must include "sub", the identity).
        expires_delta: Token lifetime. Defaults to 30 minutes.

    Returns:
        An encoded JWT string.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or DEFAULT_TOKEN_LIFETIME)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Decode and verify a JWT access token.

    Raises:
        JWTError: If the token is expired, tampered with, or invalid.

    Returns:
        The decoded payload dictionary (contains "sub", "exp", etc.).
    """
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
