from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from jotbin.errors import IdSpaceExhaustedError, NotProtectedError, StorageError
from jotbin.storage.json_store import NOTES, JsonStore
from jotbin.utils.ids import long_id, unique_short_id

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Note"
PASTE_TITLE = "Untitled"

# python attribute -> stored key
_FIELD_KEYS = {
    "id": "id",
    "title": "title",
    "content": "content",
    "encrypted": "encrypted",
    "password_hash": "passwordHash",
    "metadata": "metadata",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
    "version": "version",
}
PATCHABLE_FIELDS = frozenset({"title", "content", "encrypted", "password_hash", "metadata"})


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_dt(s: Any) -> datetime | None:
    if not isinstance(s, str):
        return None
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def _coerce_version(v: Any) -> int:
    # imported records may carry anything here
    if isinstance(v, bool):
        return 1
    try:
        n = int(v)
    except (TypeError, ValueError):
        return 1
    return n if n >= 1 else 1


def _text(v: Any) -> str:
    return v if isinstance(v, str) else ""


@dataclass(frozen=True)
class Note:
    id: str
    title: Optional[str] = DEFAULT_TITLE
    content: Optional[str] = ""
    encrypted: Optional[bool] = False
    password_hash: Optional[str] = None
    metadata: Any = field(default_factory=dict)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    version: int = 1
    # keys we don't model (importedAt, anything an import brought along)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Note":
        # stored values come back as written; defaults only fill absent keys
        known = set(_FIELD_KEYS.values())
        metadata = raw.get("metadata", {})
        return cls(
            id=str(raw.get("id", "")),
            title=raw.get("title", DEFAULT_TITLE),
            content=raw.get("content", ""),
            encrypted=raw.get("encrypted", False),
            password_hash=raw.get("passwordHash"),
            metadata=dict(metadata) if isinstance(metadata, dict) else metadata,
            created_at=raw.get("createdAt"),
            updated_at=raw.get("updatedAt"),
            version=_coerce_version(raw.get("version")),
            extra={k: v for k, v in raw.items() if k not in known},
        )

    def to_dict(self) -> dict[str, Any]:
        out = dict(self.extra)
        out.update({
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "encrypted": self.encrypted,
            "passwordHash": self.password_hash,
            "metadata": dict(self.metadata) if isinstance(self.metadata, dict) else self.metadata,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "version": self.version,
        })
        return out


@dataclass(frozen=True)
class VerifyResult:
    valid: bool
    note: Optional[Note]


def _find_index(raw_notes: list[Any], note_id: str) -> int:
    for i, raw in enumerate(raw_notes):
        if isinstance(raw, dict) and raw.get("id") == note_id:
            return i
    return -1


class NotesStore:
    """Note CRUD over the notes document.

    Each call reads the whole collection, works on it in memory and writes the
    whole collection back when it changed something.
    """

    def __init__(self, store: JsonStore, now: Callable[[], str] = _utc_now_iso):
        self.store = store
        self.now = now

    def _load(self) -> list[Any]:
        return self.store.read(NOTES)

    def _save(self, raw_notes: list[Any], what: str) -> None:
        if not self.store.write(NOTES, raw_notes):
            raise StorageError(f"Failed to {what}")

    def list_notes(self) -> list[Note]:
        return [Note.from_dict(raw) for raw in self._load() if isinstance(raw, dict)]

    def get_note(self, note_id: str) -> Note | None:
        raw_notes = self._load()
        i = _find_index(raw_notes, note_id)
        if i < 0:
            return None
        return Note.from_dict(raw_notes[i])

    def exists(self, note_id: str) -> bool:
        return _find_index(self._load(), note_id) >= 0

    def create_note(
        self,
        title: Optional[str] = None,
        content: Optional[str] = None,
        encrypted: Optional[bool] = None,
        password_hash: Optional[str] = None,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Note:
        now = self.now()
        note = Note(
            id=long_id(),
            title=title or DEFAULT_TITLE,
            content=content or "",
            encrypted=bool(encrypted),
            password_hash=password_hash or None,
            metadata=dict(metadata or {}),
            created_at=now,
            updated_at=now,
            version=1,
        )
        raw_notes = self._load()
        raw_notes.append(note.to_dict())
        self._save(raw_notes, "save note")
        return note

    def update_note(self, note_id: str, patch: Mapping[str, Any]) -> Note | None:
        """Apply a partial update.

        Only keys present in `patch` are touched; a key mapped to None
        overwrites the stored value. `metadata` is merged into the existing
        mapping (None clears it).
        """
        unknown = set(patch) - PATCHABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown note fields: {', '.join(sorted(unknown))}")

        raw_notes = self._load()
        i = _find_index(raw_notes, note_id)
        if i < 0:
            return None

        current = Note.from_dict(raw_notes[i])
        changes = {k: v for k, v in patch.items() if k != "metadata"}
        if "metadata" in patch:
            incoming = patch["metadata"]
            base = current.metadata if isinstance(current.metadata, dict) else {}
            changes["metadata"] = {} if incoming is None else {**base, **incoming}

        updated = replace(
            current,
            **changes,
            updated_at=self.now(),
            version=current.version + 1,
        )
        raw_notes[i] = updated.to_dict()
        self._save(raw_notes, "update note")
        return updated

    def delete_note(self, note_id: str) -> bool:
        raw_notes = self._load()
        kept = [raw for raw in raw_notes if not (isinstance(raw, dict) and raw.get("id") == note_id)]
        if len(kept) == len(raw_notes):
            return False
        self._save(kept, "delete note")
        return True

    def verify_password(self, note_id: str, supplied_hash: Optional[str]) -> VerifyResult | None:
        note = self.get_note(note_id)
        if note is None:
            return None
        if not note.encrypted or not note.password_hash:
            raise NotProtectedError("Note is not password protected")
        # plain ==, not a constant-time compare
        valid = note.password_hash == supplied_hash
        return VerifyResult(valid=valid, note=note if valid else None)

    def stats(self) -> dict[str, Any]:
        notes = self.list_notes()
        last_updated: Optional[str] = None
        last_dt: Optional[datetime] = None
        for n in notes:
            dt = _parse_dt(n.updated_at)
            if dt is not None and (last_dt is None or dt > last_dt):
                last_dt, last_updated = dt, n.updated_at
        return {
            "totalNotes": len(notes),
            "encryptedNotes": sum(1 for n in notes if n.encrypted),
            "totalCharacters": sum(len(_text(n.content)) for n in notes),
            "totalWords": sum(len(_text(n.content).split()) for n in notes),
            "lastUpdated": last_updated,
        }

    # --- pastebin fast path ---

    def ensure_note(self, note_id: str) -> tuple[Note, bool]:
        """Return the note, creating an empty one under this exact id if absent.

        The bool says whether it was created. Never overwrites.
        """
        raw_notes = self._load()
        i = _find_index(raw_notes, note_id)
        if i >= 0:
            return Note.from_dict(raw_notes[i]), False

        now = self.now()
        note = Note(id=note_id, title=PASTE_TITLE, created_at=now, updated_at=now)
        raw_notes.append(note.to_dict())
        self._save(raw_notes, "create note")
        return note, True

    def create_paste(self, length: int = 8) -> Note:
        note_id = unique_short_id(self.exists, length=length)
        if note_id is None:
            raise IdSpaceExhaustedError("Could not allocate a free note id")
        note, _ = self.ensure_note(note_id)
        return note

    def save_content(self, note_id: str, content: Any) -> Note | None:
        """Replace only the content; bumps updatedAt and version."""
        if not isinstance(content, str):
            raise ValueError("content must be a string")

        raw_notes = self._load()
        i = _find_index(raw_notes, note_id)
        if i < 0:
            return None

        raw = dict(raw_notes[i])
        raw["content"] = content
        raw["updatedAt"] = self.now()
        raw["version"] = _coerce_version(raw.get("version")) + 1
        raw_notes[i] = raw
        self._save(raw_notes, "save note")
        return Note.from_dict(raw)
