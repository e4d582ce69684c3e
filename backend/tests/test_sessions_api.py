import json
from datetime import datetime, timedelta, timezone


def test_session_lifecycle(client):
    r = client.post("/api/sessions", json={"noteId": "abc"})
    assert r.status_code == 200
    token = r.json()["token"]
    assert r.json()["expiresAt"]

    r = client.get(f"/api/sessions/{token}")
    assert r.status_code == 200
    assert r.json()["valid"] is True
    assert r.json()["session"]["noteId"] == "abc"


def test_expired_session_401_then_404(client, tmp_path):
    past = (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()
    (tmp_path / "sessions.json").write_text(
        json.dumps({"tok": {"noteId": "n", "createdAt": past, "expiresAt": past}}),
        encoding="utf-8",
    )

    r = client.get("/api/sessions/tok")
    assert r.status_code == 401
    assert r.json()["error"] == "Session expired"

    r = client.get("/api/sessions/tok")
    assert r.status_code == 404


def test_session_note_id_is_not_checked(client):
    r = client.post("/api/sessions", json={})
    assert r.status_code == 200
    token = r.json()["token"]
    assert client.get(f"/api/sessions/{token}").json()["session"]["noteId"] is None
