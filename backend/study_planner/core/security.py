"""Password hashing and session token helpers."""
from __future__ import annotations

import secrets

import bcrypt

from study_planner.core.errors import ValidationError

# 32 random bytes, well above the 122 bits of a v4 UUID.
SESSION_TOKEN_BYTES = 32
# bcrypt only consumes the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72
MIN_PASSWORD_LENGTH = 6


def check_password_policy(password: str) -> None:
    """Reject passwords bcrypt cannot hash faithfully."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash suitable for storage."""
    check_password_policy(password)
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a candidate password against a stored hash in constant time."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash, or the candidate is over 72 bytes.
        return False


def new_session_token() -> str:
    """Generate an opaque, URL-safe session token."""
    return secrets.token_urlsafe(SESSION_TOKEN_BYTES)
