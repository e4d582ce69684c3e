from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from jotbin.errors import StorageError
from jotbin.storage.json_store import NOTES, JsonStore
from jotbin.utils.ids import long_id


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class ImportResult:
    count: int
    total_notes: int


class BackupService:
    """Bulk export and import of the notes document."""

    def __init__(self, store: JsonStore, now: Callable[[], str] = _utc_now_iso):
        self.store = store
        self.now = now

    def export(self) -> dict[str, Any]:
        notes = self.store.read(NOTES)
        return {
            "exportedAt": self.now(),
            "notesCount": len(notes),
            "notes": notes,
        }

    def import_notes(self, notes: Any, merge: bool = True) -> ImportResult:
        """Ingest a batch of note records.

        merge=True appends every note under a fresh id. merge=False replaces
        the collection, keeping each note's own id when it has one. Every
        imported note is stamped with `importedAt`. One write per batch.
        """
        if not isinstance(notes, list) or not all(isinstance(n, dict) for n in notes):
            raise ValueError("Invalid notes format")

        imported_at = self.now()
        collection = self.store.read(NOTES) if merge else []
        for note in notes:
            note_id = long_id() if merge else (note.get("id") or long_id())
            collection.append({**note, "id": note_id, "importedAt": imported_at})

        if not self.store.write(NOTES, collection):
            raise StorageError("Failed to import notes")
        return ImportResult(count=len(notes), total_notes=len(collection))
