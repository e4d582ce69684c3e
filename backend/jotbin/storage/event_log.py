import json
import logging
import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _events_path(base_dir: Path) -> Path:
    return base_dir / "events.log"


@dataclass(frozen=True)
class Event:
    event_type: str
    note_id: Optional[str] = None
    meta: Optional[dict[str, Any]] = None

    def to_json_line(self) -> str:
        obj = {
            "event_id": str(uuid.uuid4()),
            "event_type": self.event_type,
            "ts": _utc_now_iso(),
            "note_id": self.note_id,
            "meta": self.meta or {},
        }
        return json.dumps(obj, ensure_ascii=False)


class EventLog:
    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    @property
    def path(self) -> Path:
        return _events_path(self.base_dir)

    def emit(self, event: Event) -> None:
        # audit trail only: a failed append must not fail the request
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(event.to_json_line() + "\n")
                f.flush()
                os.fsync(f.fileno())
        except OSError:
            logger.error("could not append %s to event log", event.event_type, exc_info=True)

    def read_events(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []
        out = []
        for line in self.path.read_text(encoding="utf-8").splitlines():
            if not line.strip():
                continue
            try:
                out.append(json.loads(line))
            except ValueError:
                continue
        return out
