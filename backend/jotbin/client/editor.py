from __future__ import annotations

import enum
import json
import logging
import math
import re
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional

from jotbin.client.cipher import DecryptionError, FernetPasswordCipher, PasswordCipher
from jotbin.client.debounce import Debouncer, Scheduler, thread_timer
from jotbin.client.local_storage import LocalStorage
from jotbin.utils.auth_hash import hash_password, verify_password

logger = logging.getLogger(__name__)

NOTE_KEY = "jotbin-note"
PASSWORD_KEY = "jotbin-note-password"
AUTO_SAVE_KEY = "jotbin-auto-save"

MIN_PASSWORD_LENGTH = 6
AUTO_SAVE_DELAY = 1.0
WORDS_PER_MINUTE = 200


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def password_strength(password: str) -> int:
    """Rough 0-100 score: length, mixed case, digits, symbols."""
    score = 0
    if len(password) >= 8:
        score += 25
    if len(password) >= 12:
        score += 25
    if re.search(r"[a-z]", password) and re.search(r"[A-Z]", password):
        score += 20
    if re.search(r"\d", password):
        score += 15
    if re.search(r"[^a-zA-Z0-9]", password):
        score += 15
    return min(score, 100)


@dataclass(frozen=True)
class TextStats:
    characters: int
    words: int
    lines: int
    paragraphs: int
    sentences: int
    reading_minutes: int

    @classmethod
    def of(cls, text: str) -> "TextStats":
        trimmed = text.strip()
        words = len(trimmed.split())
        return cls(
            characters=len(text),
            words=words,
            lines=len(text.split("\n")) if text else 1,
            paragraphs=len([p for p in re.split(r"\n\n+", trimmed) if p]) if trimmed else 0,
            sentences=len([s for s in re.split(r"[.!?]+", trimmed) if s.strip()]) if trimmed else 0,
            reading_minutes=math.ceil(words / WORDS_PER_MINUTE),
        )


class EditorState(enum.Enum):
    UNLOCKED = "unlocked"
    LOCKED = "locked"


class EditorLockedError(Exception):
    def __init__(self, message: str = "Unlock the note first"):
        super().__init__(message)


class PasswordPolicyError(ValueError):
    pass


class InvalidPasswordError(Exception):
    def __init__(self, message: str = "Wrong password"):
        super().__init__(message)


class Editor:
    """Single-note editor over local storage with optional password protection.

    Storage layout:
      NOTE_KEY      plaintext envelope {"content", "updatedAt"} as JSON, or the
                    cipher blob once a password is set
      PASSWORD_KEY  hex SHA-256 of the password; its presence means protected

    A protected note loads LOCKED. While LOCKED nothing can be edited, saved or
    exported. Auto-save only runs for unprotected notes; a protected note is
    written (encrypted) on manual save only. Any operation that raises leaves
    storage and state as they were.

    The auto-save timer fires on its own thread, so every operation and the
    timer callback run under one lock.
    """

    def __init__(
        self,
        storage: LocalStorage,
        cipher: Optional[PasswordCipher] = None,
        scheduler: Scheduler = thread_timer,
        now: Callable[[], str] = _utc_now_iso,
    ):
        self.storage = storage
        self.cipher = cipher or FernetPasswordCipher()
        self.now = now
        self.state = EditorState.UNLOCKED
        self.content = ""
        self.protected = False
        self.auto_save = True
        self.last_saved: Optional[str] = None
        # kept only while unlocked, so manual saves of a protected note stay encrypted
        self._password: Optional[str] = None
        self._lock = threading.RLock()
        self._autosave = Debouncer(self._auto_save_fired, AUTO_SAVE_DELAY, scheduler)

    @property
    def locked(self) -> bool:
        return self.state is EditorState.LOCKED

    @property
    def save_pending(self) -> bool:
        return self._autosave.pending

    @property
    def stats(self) -> TextStats:
        return TextStats.of(self.content)

    def load(self) -> EditorState:
        with self._lock:
            self._autosave.cancel()
            self._password = None
            self.content = ""
            self.last_saved = None

            pref = self.storage.get_item(AUTO_SAVE_KEY)
            if pref is not None:
                self.auto_save = pref == "true"

            if self.storage.get_item(PASSWORD_KEY):
                self.protected = True
                self.state = EditorState.LOCKED
                return self.state

            self.protected = False
            self.state = EditorState.UNLOCKED
            saved = self.storage.get_item(NOTE_KEY)
            if saved:
                try:
                    envelope = json.loads(saved)
                    self.content = envelope.get("content") or ""
                    self.last_saved = envelope.get("updatedAt")
                except (ValueError, AttributeError):
                    logger.warning("stored note is not a plaintext envelope, starting empty")
            return self.state

    def _require_unlocked(self) -> None:
        if self.locked:
            raise EditorLockedError()

    def edit(self, text: str) -> None:
        with self._lock:
            self._require_unlocked()
            self.content = text
            if self.auto_save and not self.protected:
                self._autosave.trigger()

    def import_text(self, text: str) -> None:
        """Replace the content with an imported file's text."""
        self.edit(text)

    def export_text(self) -> str:
        """Plain text for download. Refused while locked."""
        with self._lock:
            self._require_unlocked()
            return self.content

    def clear(self, confirm: Callable[[], bool]) -> bool:
        with self._lock:
            self._require_unlocked()
            if not confirm():
                return False
            self.edit("")
            return True

    def set_auto_save(self, enabled: bool) -> None:
        with self._lock:
            self.auto_save = enabled
            self.storage.set_item(AUTO_SAVE_KEY, "true" if enabled else "false")
            if not enabled:
                self._autosave.cancel()

    def save(self) -> None:
        with self._lock:
            self._require_unlocked()
            self._autosave.cancel()
            if self.protected:
                self._persist_encrypted()
            else:
                self._persist_plain()

    def set_password(self, password: str, confirm: str) -> None:
        with self._lock:
            self._require_unlocked()
            if len(password) < MIN_PASSWORD_LENGTH:
                raise PasswordPolicyError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
            if password != confirm:
                raise PasswordPolicyError("Passwords do not match")

            blob = self.cipher.encrypt(self.content, password)
            digest = hash_password(password)

            self._autosave.cancel()
            self.storage.set_item(NOTE_KEY, blob)
            self.storage.set_item(PASSWORD_KEY, digest)
            self.protected = True
            self._password = password
            # stays unlocked until the next load
            self.state = EditorState.UNLOCKED

    def unlock(self, password: str) -> str:
        with self._lock:
            if not self.locked:
                return self.content

            if not verify_password(password, self.storage.get_item(PASSWORD_KEY)):
                raise InvalidPasswordError()

            blob = self.storage.get_item(NOTE_KEY)
            if blob is None:
                raise DecryptionError("No encrypted note stored")
            plain = self.cipher.decrypt(blob, password)

            self.content = plain
            self._password = password
            self.state = EditorState.UNLOCKED
            return plain

    def remove_password(self, confirm: Callable[[], bool]) -> bool:
        """Drop protection after `confirm()` agrees. Returns False if it didn't."""
        with self._lock:
            self._require_unlocked()
            if not confirm():
                return False

            self._autosave.cancel()
            self.storage.remove_item(PASSWORD_KEY)
            self._persist_plain()
            self.protected = False
            self._password = None
            self.state = EditorState.UNLOCKED
            return True

    def _auto_save_fired(self) -> None:
        with self._lock:
            if self.locked or self.protected or not self.auto_save:
                return
            self._persist_plain()

    def _persist_plain(self) -> None:
        now = self.now()
        self.storage.set_item(NOTE_KEY, json.dumps({"content": self.content, "updatedAt": now}))
        self.last_saved = now

    def _persist_encrypted(self) -> None:
        self.storage.set_item(NOTE_KEY, self.cipher.encrypt(self.content, self._password))
        self.last_saved = self.now()
