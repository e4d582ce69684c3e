from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

NOTES = "notes"
SESSIONS = "sessions"

_FILES = {
    NOTES: "notes.json",
    SESSIONS: "sessions.json",
}


def _empty(kind: str) -> Any:
    return [] if kind == NOTES else {}


def _atomic_write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


class JsonStore:
    """Owns the two JSON documents backing notes and sessions.

    Every mutation is read-whole / modify / write-whole. There is no locking
    between callers: two concurrent read-modify-write cycles on the same
    document race and the later write wins.
    """

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def path_for(self, kind: str) -> Path:
        if kind not in _FILES:
            raise ValueError(f"Unknown collection: {kind}")
        return self.base_dir / _FILES[kind]

    def initialize(self) -> None:
        """Create the data dir and seed empty documents. Errors propagate."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        for kind in _FILES:
            p = self.path_for(kind)
            if not p.exists():
                logger.info("seeding empty %s", p.name)
                _atomic_write_json(p, _empty(kind))

    def read(self, kind: str) -> Any:
        p = self.path_for(kind)
        try:
            raw = json.loads(p.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return _empty(kind)
        except (OSError, ValueError):
            logger.warning("unreadable %s, using empty default", p.name, exc_info=True)
            return _empty(kind)

        if not isinstance(raw, type(_empty(kind))):
            logger.warning("%s holds %s, using empty default", p.name, type(raw).__name__)
            return _empty(kind)
        return raw

    def write(self, kind: str, collection: Any) -> bool:
        p = self.path_for(kind)
        try:
            _atomic_write_json(p, collection)
        except (OSError, TypeError, ValueError):
            logger.error("failed to write %s", p.name, exc_info=True)
            return False
        return True
