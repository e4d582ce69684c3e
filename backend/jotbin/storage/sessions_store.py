from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from jotbin.errors import StorageError
from jotbin.storage.json_store import SESSIONS, JsonStore
from jotbin.utils.ids import session_token

logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(hours=24)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_dt(s: Any) -> datetime | None:
    if not isinstance(s, str):
        return None
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class Session:
    token: str
    note_id: Optional[str]
    created_at: str
    expires_at: str

    def to_dict(self) -> dict[str, Any]:
        # token is the map key, not part of the record
        return {
            "noteId": self.note_id,
            "createdAt": self.created_at,
            "expiresAt": self.expires_at,
        }


class SessionStatus(enum.Enum):
    VALID = "valid"
    EXPIRED = "expired"
    MISSING = "missing"


@dataclass(frozen=True)
class SessionCheck:
    status: SessionStatus
    session: Optional[Session] = None


class SessionsStore:
    """Short-lived tokens bound to a note id.

    Expiry is lazy: an expired session is only removed when `validate` looks it
    up. Tokens nobody asks about again stay in the document.
    """

    def __init__(
        self,
        store: JsonStore,
        ttl: timedelta = SESSION_TTL,
        now: Callable[[], datetime] = _utc_now,
    ):
        self.store = store
        self.ttl = ttl
        self.now = now

    def create_session(self, note_id: Optional[str]) -> Session:
        # note_id is not checked against the notes document
        now = self.now()
        session = Session(
            token=session_token(),
            note_id=note_id,
            created_at=now.isoformat(),
            expires_at=(now + self.ttl).isoformat(),
        )
        sessions = self.store.read(SESSIONS)
        sessions[session.token] = session.to_dict()
        if not self.store.write(SESSIONS, sessions):
            raise StorageError("Failed to create session")
        return session

    def validate(self, token: str) -> SessionCheck:
        sessions = self.store.read(SESSIONS)
        raw = sessions.get(token)
        if not isinstance(raw, dict):
            return SessionCheck(SessionStatus.MISSING)

        session = Session(
            token=token,
            note_id=raw.get("noteId"),
            created_at=raw.get("createdAt", ""),
            expires_at=raw.get("expiresAt", ""),
        )
        expires_at = _parse_dt(session.expires_at)
        if expires_at is None or self.now() > expires_at:
            del sessions[token]
            if not self.store.write(SESSIONS, sessions):
                logger.error("expired session could not be pruned")
            return SessionCheck(SessionStatus.EXPIRED, session)

        return SessionCheck(SessionStatus.VALID, session)
