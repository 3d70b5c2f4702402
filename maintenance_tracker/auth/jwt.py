"""Session tokens issued by the local backend."""

from datetime import datetime, timedelta, timezone

from jose import jwt

DEFAULT_ALGORITHM = "HS256"


def create_access_token(
    data: dict,
    secret_key: str,
    *,
    expires_delta: timedelta,
    algorithm: str = DEFAULT_ALGORITHM,
) -> tuple[str, datetime]:
    """Create a signed session token.

    Args:
        data: Payload data. Must include ``sub`` (user UUID as string).
        secret_key: Signing key.
        expires_delta: Lifetime of the token.
        algorithm: JOSE signing algorithm.

    Returns:
        The encoded JWT and its expiry instant.
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + expires_delta
    to_encode.update({"exp": expire, "iat": now, "type": "access"})
    return jwt.encode(to_encode, secret_key, algorithm=algorithm), expire


def decode_token(token: str, secret_key: str, *, algorithm: str = DEFAULT_ALGORITHM) -> dict:
    """Decode and verify a session token.

    Raises:
        jose.JWTError: If the token is invalid, expired, or malformed.
    """
    return jwt.decode(token, secret_key, algorithms=[algorithm])
