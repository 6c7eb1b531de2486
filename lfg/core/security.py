"""
Password hashing and JWT helpers.

Passwords are hashed with bcrypt; access tokens are HS256 JWTs carrying the
user's id and username.
"""

import base64
import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from lfg.config.settings import settings
from lfg.services.base import AuthenticationError

logger = logging.getLogger(__name__)

INVALID_TOKEN_MESSAGE = "Token is invalid"


def _prehash(password: str) -> bytes:
    # bcrypt rejects input over 72 bytes; the base64 sha256 digest is always 44 bytes
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    """Return the bcrypt hash of ``password``. Any length is accepted."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_prehash(password), salt).decode("utf-8")


def verify_password(password: str, hashed: Optional[str]) -> bool:
    """Check ``password`` against a stored bcrypt hash."""
    if not hashed or password is None:
        return False
    try:
        return bcrypt.checkpw(_prehash(password), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.error("Could not verify password: stored hash is malformed")
        return False


def create_access_token(user_id: int, username: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed access token for a user."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    claims = {
        "user_id": user_id,
        "username": username,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(claims, settings.token_secret, algorithm=settings.token_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode an access token.

    Raises:
        AuthenticationError: the signature, algorithm or expiry is invalid,
            or the token carries no ``user_id`` claim.
    """
    try:
        payload = jwt.decode(token, settings.token_secret, algorithms=[settings.token_algorithm])
    except JWTError as e:
        logger.warning("Could not parse JWT", extra={"error": str(e)})
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)

    if not isinstance(payload.get("user_id"), int):
        logger.warning("Could not parse JWT", extra={"error": "user_id claim is missing"})
        raise AuthenticationError(INVALID_TOKEN_MESSAGE)
    return payload
