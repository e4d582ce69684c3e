from jotbin.client.cipher import DecryptionError, FernetPasswordCipher, PasswordCipher
from jotbin.client.debounce import Debouncer
from jotbin.client.editor import (
    Editor,
    EditorLockedError,
    EditorState,
    InvalidPasswordError,
    PasswordPolicyError,
    TextStats,
    password_strength,
)
from jotbin.client.local_storage import FileStorage, LocalStorage, MemoryStorage
from jotbin.client.remote import PasteClient

__all__ = [
    "DecryptionError",
    "Debouncer",
    "Editor",
    "EditorLockedError",
    "EditorState",
    "FernetPasswordCipher",
    "FileStorage",
    "InvalidPasswordError",
    "LocalStorage",
    "MemoryStorage",
    "PasswordCipher",
    "PasswordPolicyError",
    "PasteClient",
    "TextStats",
    "password_strength",
]
