from __future__ import annotations

import random
import secrets
import string
from typing import Callable

SHORT_ID_ALPHABET = string.ascii_letters
SHORT_ID_MAX_ATTEMPTS = 20


def long_id() -> str:
    """128 random bits as 32 lowercase hex chars."""
    return secrets.token_hex(16)


def session_token() -> str:
    """256 random bits as 64 lowercase hex chars."""
    return secrets.token_hex(32)


def short_id(length: int = 8) -> str:
    # human-facing, not a secret: plain PRNG is fine
    return "".join(random.choices(SHORT_ID_ALPHABET, k=length))


def unique_short_id(
    exists: Callable[[str], bool],
    length: int = 8,
    max_attempts: int = SHORT_ID_MAX_ATTEMPTS,
) -> str | None:
    """Draw short ids until one is not taken.

    Returns None once `max_attempts` candidates have all collided; the caller
    decides how to report that.
    """
    for _ in range(max_attempts):
        candidate = short_id(length)
        if not exists(candidate):
            return candidate
    return None
