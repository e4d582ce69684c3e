from fastapi import APIRouter, HTTPException

from jotbin.api import state
from jotbin.errors import NotProtectedError, StorageError
from jotbin.models.notes import NoteCreate, NotePatch, VerifyIn
from jotbin.storage.event_log import Event

router = APIRouter(prefix="/api", tags=["notes"])


@router.get("/notes")
def list_notes() -> dict:
    notes = state.notes.list_notes()
    return {"success": True, "notes": [n.to_dict() for n in notes], "count": len(notes)}


@router.get("/notes/{note_id}")
def get_note(note_id: str) -> dict:
    note = state.notes.get_note(note_id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return {"success": True, "note": note.to_dict()}


@router.post("/notes", status_code=201)
def create_note(payload: NoteCreate) -> dict:
    try:
        note = state.notes.create_note(
            title=payload.title,
            content=payload.content,
            encrypted=payload.encrypted,
            password_hash=payload.password_hash,
            metadata=payload.metadata,
        )
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to save note")

    state.event_log.emit(Event(
        event_type="NOTE_CREATED",
        note_id=note.id,
        meta={"version": note.version, "encrypted": note.encrypted},
    ))
    return {"success": True, "note": note.to_dict(), "message": "Note created successfully"}


@router.put("/notes/{note_id}")
def update_note(note_id: str, payload: NotePatch) -> dict:
    patch = payload.to_patch()
    try:
        updated = state.notes.update_note(note_id, patch)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to update note")
    if updated is None:
        raise HTTPException(status_code=404, detail="Note not found")

    state.event_log.emit(Event(
        event_type="NOTE_UPDATED",
        note_id=note_id,
        meta={"version": updated.version, "fields": sorted(patch)},
    ))
    return {"success": True, "note": updated.to_dict(), "message": "Note updated successfully"}


@router.delete("/notes/{note_id}")
def delete_note(note_id: str) -> dict:
    try:
        deleted = state.notes.delete_note(note_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to delete note")
    if not deleted:
        raise HTTPException(status_code=404, detail="Note not found")

    state.event_log.emit(Event(event_type="NOTE_DELETED", note_id=note_id))
    return {"success": True, "message": "Note deleted successfully"}


@router.post("/notes/{note_id}/verify")
def verify_password(note_id: str, payload: VerifyIn) -> dict:
    try:
        result = state.notes.verify_password(note_id, payload.password_hash)
    except NotProtectedError:
        raise HTTPException(status_code=400, detail="Note is not password protected")
    if result is None:
        raise HTTPException(status_code=404, detail="Note not found")

    # never hand back the note on a failed check
    return {
        "success": True,
        "valid": result.valid,
        "note": result.note.to_dict() if result.note else None,
    }


@router.get("/stats")
def stats() -> dict:
    return {"success": True, "stats": state.notes.stats()}
