# aspas/core/security.py
"""
Security module for authentication and authorization.
Handles password hashing, JWT token creation/validation, and password reset tokens.
"""
import datetime as dt
import secrets

import jwt  # PyJWT
from passlib.context import CryptContext

from aspas.config import settings

# Password hashing context
# Argon2 is a modern, secure password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

# JWT configuration
JWT_SECRET = settings.jwt_secret  # Secret key for JWT signing (use strong secret in production)
ACCESS_TOKEN_EXPIRE_DAYS = settings.access_token_expire_days  # Token validity in days
JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)

# Password reset tokens: 32 random bytes, hex encoded
RESET_TOKEN_BYTES = 32
PASSWORD_RESET_TTL = dt.timedelta(minutes=settings.password_reset_ttl_minutes)

# Verified against when the user does not exist, so both login failure paths hash once
_DUMMY_HASH = pwd_context.hash(secrets.token_hex(16))


def utc_now() -> dt.datetime:
    """Current UTC datetime with timezone information."""
    return dt.datetime.now(dt.timezone.utc)


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    """
    Verify a plain text password against a hashed password.

    A missing hash is checked against a dummy hash and always fails, keeping the
    work done for unknown accounts identical to a wrong password.
    """
    if not hashed:
        pwd_context.verify(plain, _DUMMY_HASH)
        return False
    return pwd_context.verify(plain, hashed)


def create_access_token(user_id: str, email: str, role: str) -> str:
    """
    Create a JWT access token for user authentication.

    Token payload includes:
        - userId: User identifier
        - email: User email
        - role: User role for authorization (ADMIN / FREE / PRO)
        - iat: Issued at timestamp
        - exp: Expiration timestamp
    """
    now = utc_now()
    payload = {
        "userId": user_id,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + dt.timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])


def generate_reset_token() -> str:
    """Opaque, cryptographically random password reset token (64 hex chars)."""
    return secrets.token_hex(RESET_TOKEN_BYTES)


def reset_token_expiry(now: dt.datetime | None = None) -> dt.datetime:
    return (now or utc_now()) + PASSWORD_RESET_TTL


def as_utc(value: dt.datetime) -> dt.datetime:
    """Treat naive datetimes coming back from the database as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


def iso_utc(value: dt.datetime | None) -> str | None:
    """ISO 8601 string in UTC with a trailing "Z" (None passes through)."""
    if value is None:
        return None
    return as_utc(value).astimezone(dt.timezone.utc).replace(tzinfo=None).isoformat() + "Z"
