"""Password hashing helpers using passlib.

Notes are protected client-side, and the server only ever compares a hash the
client sends against the one it stored. That rules out salted schemes: the same
password has to produce the same hash every time. We therefore run passlib's
`hex_sha256` scheme, whose output is the bare lowercase SHA-256 hex digest.

- hash_password(plain: str) -> str
- verify_password(plain: str, hashed: str) -> bool
"""
from __future__ import annotations

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["hex_sha256"])


def hash_password(plain: str) -> str:
    """Hash a plaintext password and return the hex digest."""
    if plain is None:
        raise ValueError("Password must not be None")
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Check a plaintext password against a stored digest.

    Returns False for a missing or malformed digest instead of raising.
    """
    if plain is None or hashed is None:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False
