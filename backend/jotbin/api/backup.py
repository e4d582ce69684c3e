from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from jotbin.api import state
from jotbin.errors import StorageError
from jotbin.models.backup import ImportIn
from jotbin.storage.event_log import Event

router = APIRouter(prefix="/api", tags=["backup"])


@router.get("/export")
def export_notes() -> JSONResponse:
    snapshot = state.backups.export()
    stamp = int(datetime.now(timezone.utc).timestamp() * 1000)
    return JSONResponse(
        snapshot,
        headers={"Content-Disposition": f"attachment; filename=jotbin-notes-backup-{stamp}.json"},
    )


@router.post("/import")
def import_notes(payload: ImportIn) -> dict:
    try:
        result = state.backups.import_notes(payload.notes, merge=payload.merge)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid notes format")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to import notes")

    state.event_log.emit(Event(
        event_type="NOTES_IMPORTED",
        meta={"count": result.count, "merge": payload.merge},
    ))
    return {
        "success": True,
        "message": "Notes imported successfully",
        "count": result.count,
        "totalNotes": result.total_notes,
    }
