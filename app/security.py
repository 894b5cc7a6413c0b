"""
Password hashing and JWT helpers.
"""
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
from jose import jwt, JWTError
import bcrypt

from app.config import settings


def hash_password(password: str) -> str:
    """
    Hash a plain password using bcrypt.
    Bcrypt limits passwords to 72 bytes, so we handle that constraint.
    """
    password_bytes = password.encode('utf-8')
    # bcrypt limits to 72 bytes
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]

    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a hashed password."""
    if not hashed_password:  # Handle None case
        return False

    password_bytes = plain_password.encode('utf-8')
    if len(password_bytes) > 72:
        password_bytes = password_bytes[:72]

    hashed_bytes = hashed_password.encode('utf-8')
    return bcrypt.checkpw(password_bytes, hashed_bytes)


def create_jwt(
    data: Dict[str, Any],
    secret: str = None,
    minutes: int = None,
    algorithm: str = None
) -> str:
    """
    Create a JWT token with the given data.

    Args:
        data: Dictionary to encode in the token
        secret: JWT secret (defaults to settings.JWT_SECRET)
        minutes: Token expiry in minutes (defaults to settings.JWT_EXPIRY_MINUTES)
        algorithm: JWT algorithm (defaults to settings.JWT_ALGORITHM)
    """
    secret = secret or settings.JWT_SECRET
    minutes = settings.JWT_EXPIRY_MINUTES if minutes is None else minutes
    algorithm = algorithm or settings.JWT_ALGORITHM

    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode['exp'] = expire

    return jwt.encode(to_encode, secret, algorithm=algorithm)


def decode_jwt(
    token: str,
    secret: str = None,
    algorithm: str = None
) -> Optional[Dict[str, Any]]:
    """
    Decode and verify a JWT token.

    Returns:
        Decoded token payload or None if invalid
    """
    secret = secret or settings.JWT_SECRET
    algorithm = algorithm or settings.JWT_ALGORITHM

    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError:
        return None
