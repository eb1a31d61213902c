"""JWT token creation and verification utilities.

Tokens are stateless and carry the user id in the 'sub' claim. The
training execution core only ever sees the decoded user id.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from loguru import logger

from app.config.settings import settings

TOKEN_ISSUER = "fitness-tracker-service"


def create_access_token(user_id: str, expires_in: timedelta | None = None) -> str:
    """Create a signed access token for a user.

    Args:
        user_id: User ID to encode in the 'sub' claim
        expires_in: Token lifetime, defaults to AUTH_TOKEN_EXPIRE_DAYS

    Returns:
        JWT token string
    """
    user_id_str = str(user_id) if user_id is not None else ""
    if not user_id_str:
        raise ValueError("user_id cannot be None or empty")

    now = datetime.now(timezone.utc)
    lifetime = expires_in if expires_in is not None else timedelta(days=settings.auth_token_expire_days)
    payload = {
        "sub": user_id_str,
        "exp": now + lifetime,
        "iat": now,
        "iss": TOKEN_ISSUER,
    }
    return jwt.encode(payload, settings.auth_secret_key, algorithm=settings.auth_algorithm)


def decode_access_token(token: str) -> str:
    """Decode and verify an access token.

    Raises:
        ValueError: If token is invalid, expired or has no subject
    """
    try:
        payload = jwt.decode(
            token,
            settings.auth_secret_key,
            algorithms=[settings.auth_algorithm],
            issuer=TOKEN_ISSUER,
        )
    except JWTError as e:
        logger.warning(f"JWT decode failed: {e}")
        raise ValueError("Invalid or expired token") from e

    user_id = payload.get("sub")
    if not user_id:
        raise ValueError("Token missing user ID")
    return str(user_id)
