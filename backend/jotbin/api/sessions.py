from fastapi import APIRouter, HTTPException

from jotbin.api import state
from jotbin.errors import StorageError
from jotbin.models.sessions import SessionCreate
from jotbin.storage.event_log import Event
from jotbin.storage.sessions_store import SessionStatus

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.post("")
def create_session(payload: SessionCreate) -> dict:
    try:
        session = state.sessions.create_session(payload.note_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to create session")

    state.event_log.emit(Event(
        event_type="SESSION_CREATED",
        note_id=session.note_id,
        meta={"expires_at": session.expires_at},
    ))
    return {"success": True, "token": session.token, "expiresAt": session.expires_at}


@router.get("/{token}")
def validate_session(token: str) -> dict:
    check = state.sessions.validate(token)
    if check.status is SessionStatus.MISSING:
        raise HTTPException(status_code=404, detail="Session not found")
    if check.status is SessionStatus.EXPIRED:
        state.event_log.emit(Event(event_type="SESSION_EXPIRED", note_id=check.session.note_id))
        raise HTTPException(status_code=401, detail="Session expired")

    return {"success": True, "session": check.session.to_dict(), "valid": True}
