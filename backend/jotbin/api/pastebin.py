import html
import json
from string import Template

from fastapi import APIRouter, HTTPException
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from jotbin import config
from jotbin.api import state
from jotbin.errors import IdSpaceExhaustedError, StorageError
from jotbin.models.notes import SaveIn
from jotbin.storage.event_log import Event

router = APIRouter(tags=["pastebin"])

_EDITOR_PAGE = Template("""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8"/>
  <meta name="viewport" content="width=device-width,initial-scale=1"/>
  <title>$title</title>
  <style>
    html, body { height: 100%; margin: 0; }
    body { display: flex; flex-direction: column; font-family: ui-sans-serif, system-ui, sans-serif; }
    header { padding: 8px 12px; border-bottom: 1px solid #e2e8f0; display: flex; gap: 12px; align-items: center; }
    header a { color: #2563eb; text-decoration: none; }
    #status { color: #64748b; font-size: 13px; margin-left: auto; }
    textarea { flex: 1; border: 0; padding: 12px; font: 15px/1.6 ui-monospace, Menlo, Consolas, monospace; resize: none; outline: none; }
  </style>
</head>
<body>
  <header>
    <strong>$title</strong>
    <a href="/api/$id_url?raw=true">raw</a>
    <a href="/">new</a>
    <span id="status"></span>
  </header>
  <textarea id="content" spellcheck="false" autofocus></textarea>
  <script>
    const noteId = $id_json;
    const area = document.getElementById('content');
    const status = document.getElementById('status');
    let timer = null;

    async function save() {
      status.textContent = 'saving...';
      const res = await fetch('/save/' + encodeURIComponent(noteId), {
        method: 'POST',
        headers: {'content-type': 'application/json'},
        body: JSON.stringify({content: area.value}),
      });
      status.textContent = res.ok ? 'saved' : 'save failed (' + res.status + ')';
    }

    area.addEventListener('input', () => {
      clearTimeout(timer);
      timer = setTimeout(save, 1000);
    });
    window.addEventListener('keydown', (e) => {
      if ((e.ctrlKey || e.metaKey) && e.key === 's') { e.preventDefault(); clearTimeout(timer); save(); }
    });

    fetch('/api/' + encodeURIComponent(noteId) + '?raw=true')
      .then((r) => (r.ok ? r.text() : ''))
      .then((text) => { area.value = text; });
  </script>
</body>
</html>
""")


def render_editor(note_id: str, title: str) -> str:
    return _EDITOR_PAGE.substitute(
        title=html.escape(title),
        id_url=html.escape(note_id, quote=True),
        # no raw markup characters inside the <script> block
        id_json=json.dumps(note_id).replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026"),
    )


@router.get("/")
def new_paste() -> RedirectResponse:
    try:
        note = state.notes.create_paste(length=config.short_id_length())
    except IdSpaceExhaustedError:
        raise HTTPException(status_code=500, detail="Could not allocate a note id")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to create note")

    state.event_log.emit(Event(event_type="NOTE_CREATED", note_id=note.id, meta={"via": "pastebin"}))
    return RedirectResponse(url=f"/note/{note.id}", status_code=302)


@router.get("/note/{note_id}", response_class=HTMLResponse)
def editor_page(note_id: str) -> HTMLResponse:
    try:
        note, created = state.notes.ensure_note(note_id)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to create note")

    if created:
        state.event_log.emit(Event(event_type="NOTE_CREATED", note_id=note.id, meta={"via": "pastebin"}))
    return HTMLResponse(render_editor(note.id, note.title or ""))


@router.post("/save/{note_id}")
def save_content(note_id: str, payload: SaveIn) -> dict:
    try:
        note = state.notes.save_content(note_id, payload.content)
    except ValueError:
        raise HTTPException(status_code=400, detail="Content must be a string")
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to save note")
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")

    state.event_log.emit(Event(event_type="NOTE_SAVED", note_id=note.id, meta={"version": note.version}))
    return {"success": True, "version": note.version, "updatedAt": note.updated_at}


# registered after every other /api/... route, it would shadow them otherwise
@router.get("/api/{note_id}")
def read_note(note_id: str, raw: bool = False):
    note = state.notes.get_note(note_id)
    if note is None:
        if raw:
            return PlainTextResponse("Note not found", status_code=404)
        raise HTTPException(status_code=404, detail="Note not found")
    if raw:
        return PlainTextResponse(note.content if isinstance(note.content, str) else "")
    return {"success": True, "note": note.to_dict()}
