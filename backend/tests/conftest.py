import importlib

import pytest
from fastapi.testclient import TestClient

from jotbin.storage.json_store import JsonStore
from jotbin.storage.notes_store import NotesStore


@pytest.fixture()
def client(tmp_path, monkeypatch):
    # isolate data dir per test
    monkeypatch.setenv("APP_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("APP_STATIC_DIR", str(tmp_path / "dist"))

    # reload so api/state.py builds its stores on the new dir
    import jotbin.api.state
    import jotbin.main
    importlib.reload(jotbin.api.state)
    importlib.reload(jotbin.main)

    with TestClient(jotbin.main.app) as c:
        yield c


@pytest.fixture()
def store(tmp_path):
    s = JsonStore(tmp_path)
    s.initialize()
    return s


@pytest.fixture()
def notes(store):
    return NotesStore(store)
