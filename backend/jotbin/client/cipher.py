from __future__ import annotations

import base64
import binascii
import os
from typing import Protocol

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

SALT_BYTES = 16
DEFAULT_ITERATIONS = 200_000


class DecryptionError(Exception):
    """Ciphertext could not be opened with the given password."""


class PasswordCipher(Protocol):
    def encrypt(self, plaintext: str, password: str) -> str: ...

    def decrypt(self, blob: str, password: str) -> str: ...


class FernetPasswordCipher:
    """PBKDF2-SHA256 key derivation + Fernet (AES-CBC with HMAC).

    Blob layout: urlsafe-b64(salt) "$" fernet-token. Fernet authenticates, so
    a wrong key and a tampered blob both fail loudly instead of yielding garbage.
    """

    def __init__(self, iterations: int = DEFAULT_ITERATIONS):
        self.iterations = iterations

    def _fernet(self, password: str, salt: bytes) -> Fernet:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=self.iterations,
        )
        key = base64.urlsafe_b64encode(kdf.derive(password.encode("utf-8")))
        return Fernet(key)

    def encrypt(self, plaintext: str, password: str) -> str:
        salt = os.urandom(SALT_BYTES)
        token = self._fernet(password, salt).encrypt(plaintext.encode("utf-8"))
        return base64.urlsafe_b64encode(salt).decode("ascii") + "$" + token.decode("ascii")

    def decrypt(self, blob: str, password: str) -> str:
        try:
            salt_b64, token = blob.split("$", 1)
            salt = base64.urlsafe_b64decode(salt_b64.encode("ascii"))
            plain = self._fernet(password, salt).decrypt(token.encode("ascii"))
            return plain.decode("utf-8")
        except (ValueError, binascii.Error, InvalidToken, UnicodeError) as exc:
            raise DecryptionError("Could not decrypt note") from exc
