import json
from datetime import datetime, timedelta, timezone

import pytest

from jotbin.errors import StorageError
from jotbin.storage.sessions_store import SessionsStore, SessionStatus


def test_create_then_validate_is_valid(store):
    sessions = SessionsStore(store)
    s = sessions.create_session("note-1")

    check = sessions.validate(s.token)
    assert check.status is SessionStatus.VALID
    assert check.session.note_id == "note-1"
    assert len(s.token) == 64


def test_expiry_is_24h_after_creation(store):
    fixed = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    s = SessionsStore(store, now=lambda: fixed).create_session("n")

    assert datetime.fromisoformat(s.created_at) == fixed
    assert datetime.fromisoformat(s.expires_at) == fixed + timedelta(hours=24)


def test_expired_session_is_deleted_on_lookup(store, tmp_path):
    long_ago = datetime.now(timezone.utc) - timedelta(days=2)
    token = SessionsStore(store, now=lambda: long_ago).create_session("n").token

    sessions = SessionsStore(store)
    first = sessions.validate(token)
    assert first.status is SessionStatus.EXPIRED
    assert token not in json.loads((tmp_path / "sessions.json").read_text(encoding="utf-8"))

    assert sessions.validate(token).status is SessionStatus.MISSING


def test_unknown_token_is_missing(store):
    assert SessionsStore(store).validate("nope").status is SessionStatus.MISSING


def test_expired_sessions_are_not_swept_by_other_calls(store, tmp_path):
    long_ago = datetime.now(timezone.utc) - timedelta(days=2)
    stale = SessionsStore(store, now=lambda: long_ago).create_session("old").token

    sessions = SessionsStore(store)
    fresh = sessions.create_session("new").token
    sessions.validate(fresh)

    on_disk = json.loads((tmp_path / "sessions.json").read_text(encoding="utf-8"))
    assert stale in on_disk


def test_create_session_storage_failure(store, monkeypatch):
    monkeypatch.setattr(store, "write", lambda kind, data: False)
    with pytest.raises(StorageError):
        SessionsStore(store).create_session("n")
