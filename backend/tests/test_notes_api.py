import json

from jotbin.api import state


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert "timestamp" in body and "version" in body


def test_startup_seeds_documents(client, tmp_path):
    assert json.loads((tmp_path / "notes.json").read_text()) == []
    assert json.loads((tmp_path / "sessions.json").read_text()) == {}


def test_crud_flow(client):
    r = client.post("/api/notes", json={"title": "t1", "content": "c1", "metadata": {"b": 2}})
    assert r.status_code == 201
    note = r.json()["note"]
    assert note["version"] == 1
    assert note["createdAt"] == note["updatedAt"]
    note_id = note["id"]

    r = client.get("/api/notes")
    assert r.status_code == 200
    assert r.json()["count"] == 1

    r = client.get(f"/api/notes/{note_id}")
    assert r.status_code == 200
    assert r.json()["note"]["content"] == "c1"

    r = client.put(f"/api/notes/{note_id}", json={"metadata": {"a": 1}})
    assert r.status_code == 200
    updated = r.json()["note"]
    assert updated["metadata"] == {"a": 1, "b": 2}
    assert updated["title"] == "t1"
    assert updated["version"] == 2

    r = client.delete(f"/api/notes/{note_id}")
    assert r.status_code == 200
    assert r.json()["success"] is True

    r = client.delete(f"/api/notes/{note_id}")
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Note not found"}


def test_create_defaults(client):
    r = client.post("/api/notes", json={})
    assert r.status_code == 201
    note = r.json()["note"]
    assert note["title"] == "Untitled Note"
    assert note["content"] == ""
    assert note["encrypted"] is False
    assert note["passwordHash"] is None
    assert note["metadata"] == {}


def test_put_null_overwrites_but_absent_does_not(client):
    note_id = client.post(
        "/api/notes", json={"content": "x", "encrypted": True, "passwordHash": "H"}
    ).json()["note"]["id"]

    r = client.put(f"/api/notes/{note_id}", json={"title": "renamed"})
    assert r.json()["note"]["passwordHash"] == "H"

    r = client.put(f"/api/notes/{note_id}", json={"passwordHash": None})
    assert r.json()["note"]["passwordHash"] is None


def test_missing_note_routes(client):
    assert client.get("/api/notes/nope").status_code == 404
    assert client.put("/api/notes/nope", json={"title": "x"}).status_code == 404
    assert client.post("/api/notes/nope/verify", json={"passwordHash": "h"}).status_code == 404


def test_verify_password(client):
    note_id = client.post(
        "/api/notes", json={"content": "secret", "encrypted": True, "passwordHash": "H"}
    ).json()["note"]["id"]

    r = client.post(f"/api/notes/{note_id}/verify", json={"passwordHash": "H"})
    assert r.status_code == 200
    assert r.json()["valid"] is True
    assert r.json()["note"]["content"] == "secret"

    r = client.post(f"/api/notes/{note_id}/verify", json={"passwordHash": "wrong"})
    assert r.status_code == 200
    assert r.json()["valid"] is False
    assert r.json()["note"] is None
    assert "secret" not in r.text


def test_verify_unprotected_note_is_400(client):
    note_id = client.post("/api/notes", json={"content": "x"}).json()["note"]["id"]
    r = client.post(f"/api/notes/{note_id}/verify", json={"passwordHash": "H"})
    assert r.status_code == 400
    assert r.json()["error"] == "Note is not password protected"


def test_stats(client):
    client.post("/api/notes", json={"content": "a b c"})
    client.post("/api/notes", json={"content": "d", "encrypted": True, "passwordHash": "h"})

    stats = client.get("/api/stats").json()["stats"]
    assert stats["totalNotes"] == 2
    assert stats["encryptedNotes"] == 1
    assert stats["totalWords"] == 4
    assert stats["totalCharacters"] == 6
    assert stats["lastUpdated"] is not None


def test_storage_failure_is_500(client, monkeypatch):
    monkeypatch.setattr(state.store, "write", lambda kind, data: False)
    r = client.post("/api/notes", json={"content": "x"})
    assert r.status_code == 500
    assert r.json() == {"success": False, "error": "Failed to save note"}


def test_bad_body_is_400(client):
    r = client.post("/api/notes", json={"title": ["not", "a", "string"]})
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_mutations_are_written_to_event_log(client):
    note_id = client.post("/api/notes", json={"content": "x"}).json()["note"]["id"]
    client.put(f"/api/notes/{note_id}", json={"content": "y"})
    client.delete(f"/api/notes/{note_id}")

    types = [e["event_type"] for e in state.event_log.read_events()]
    assert types == ["NOTE_CREATED", "NOTE_UPDATED", "NOTE_DELETED"]


def test_put_values_read_back_unchanged(client):
    note_id = client.post("/api/notes", json={"title": "t", "content": "c"}).json()["note"]["id"]

    put = client.put(f"/api/notes/{note_id}", json={"title": "", "content": None, "encrypted": None})
    assert put.status_code == 200

    got = client.get(f"/api/notes/{note_id}").json()["note"]
    for key in ("title", "content", "encrypted"):
        assert got[key] == put.json()["note"][key]
    assert got["title"] == ""
    assert got["content"] is None


def test_imported_junk_version_does_not_break_reads(client):
    r = client.post("/api/import", json={"notes": [{"id": "a", "version": "v2", "content": "x"}], "merge": False})
    assert r.status_code == 200

    assert client.get("/api/notes").status_code == 200
    assert client.get("/api/stats").json()["stats"]["totalNotes"] == 1
    note = client.get("/api/notes/a").json()["note"]
    assert note["version"] == 1

    r = client.put("/api/notes/a", json={"content": "y"})
    assert r.json()["note"]["version"] == 2


def test_long_titles_are_accepted(client):
    title = "t" * 5000
    r = client.post("/api/notes", json={"title": title})
    assert r.status_code == 201
    note_id = r.json()["note"]["id"]

    r = client.put(f"/api/notes/{note_id}", json={"title": title + "!"})
    assert r.status_code == 200
    assert r.json()["note"]["title"] == title + "!"


def test_null_content_is_served_as_empty_raw_text(client):
    client.get("/note/abc")
    client.put("/api/notes/abc", json={"content": None, "title": None})

    r = client.get("/api/abc", params={"raw": "true"})
    assert r.status_code == 200
    assert r.text == ""
    assert client.get("/note/abc").status_code == 200
