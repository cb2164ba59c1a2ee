"""Admin password helpers (hashing and verification)."""

from __future__ import annotations

import secrets

from argon2 import PasswordHasher, exceptions as argon_exc

from .config import Settings

_ph = PasswordHasher()
_PREFIX = "argon2$"


def hash_password(password: str) -> str:
    """Create an Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if not stored.startswith(_PREFIX):
        return False
    try:
        return _ph.verify(stored[len(_PREFIX) :], password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def check_admin_password(password: str | None, settings: Settings) -> bool:
    """
    Compare a submitted password against the configured admin secret.

    ADMIN_PASSWORD_HASH takes precedence; the plain ADMIN_PASSWORD is compared
    in constant time.
    """
    candidate = password or ""
    if not candidate:
        return False
    if settings.admin_password_hash:
        return verify_password(candidate, settings.admin_password_hash)
    if settings.admin_password:
        return secrets.compare_digest(candidate.encode(), settings.admin_password.encode())
    return False
