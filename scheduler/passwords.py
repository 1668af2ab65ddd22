"""
Salt and digest primitives for stored credentials.

Accounts keep the salt and the digest side by side, so the digest is a plain
PBKDF2-HMAC over the password with the stored salt.
"""

import hashlib
import hmac
import secrets

from scheduler.config import get_settings

SALT_BYTES = 16
HASH_BYTES = 16


def generate_salt() -> bytes:
    return secrets.token_bytes(SALT_BYTES)


def generate_hash(password: str, salt: bytes) -> bytes:
    settings = get_settings()
    return hashlib.pbkdf2_hmac(
        settings.password_hash_algorithm,
        password.encode("utf-8"),
        salt,
        settings.password_hash_iterations,
        dklen=HASH_BYTES,
    )


def verify_password(password: str, salt: bytes, expected_hash: bytes) -> bool:
    """Recompute the digest with the stored salt and compare in constant time."""
    return hmac.compare_digest(generate_hash(password, salt), expected_hash)
