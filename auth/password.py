"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and a work factor taken from ``config.bcrypt_rounds``.
"""

from __future__ import annotations

import bcrypt

from config.settings import config

# bcrypt only looks at the first 72 bytes of the input.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (auto-salted)."""
    return bcrypt.hashpw(
        password.encode(), bcrypt.gensalt(rounds=config.bcrypt_rounds)
    ).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False
