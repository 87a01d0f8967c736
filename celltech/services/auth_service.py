from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from celltech.config import get_settings

settings = get_settings()


def hash_password(password: str) -> str:
    """One-way bcrypt hash using the configured work factor."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_SALT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Constant-time comparison of a plain password against a stored hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(email: str, expires_minutes: Optional[int] = None) -> str:
    """Issue a signed token bound to the user's email."""
    expires_minutes = expires_minutes or settings.JWT_ACCESS_EXPIRES_IN
    payload = {
        "email": email,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Verify a token and return its payload.

    Raises:
        jwt.PyJWTError: If the token is malformed, tampered with or expired
    """
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
