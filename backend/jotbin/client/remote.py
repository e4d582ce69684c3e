from __future__ import annotations

from typing import Optional
from urllib.parse import quote

import httpx


class PasteClient:
    """Talks to the pastebin routes of a running jotbin server.

    Pass `client` to reuse an existing httpx.Client (FastAPI's TestClient is one).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3001",
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.http = client or httpx.Client(base_url=base_url, timeout=timeout)

    def new_paste(self) -> str:
        """Allocate a new short id and return it."""
        r = self.http.get("/", follow_redirects=False)
        if r.status_code != 302:
            r.raise_for_status()
            raise httpx.HTTPStatusError(f"expected redirect, got {r.status_code}", request=r.request, response=r)
        return r.headers["location"].rstrip("/").rsplit("/", 1)[-1]

    def open(self, note_id: str) -> None:
        """Visit the editor page, which creates the note if it is new."""
        self.http.get(f"/note/{quote(note_id, safe='')}").raise_for_status()

    def fetch_raw(self, note_id: str) -> Optional[str]:
        r = self.http.get(f"/api/{quote(note_id, safe='')}", params={"raw": "true"})
        if r.status_code == 404:
            return None
        r.raise_for_status()
        return r.text

    def save(self, note_id: str, content: str) -> int:
        """Store new content; returns the note's version after the save."""
        r = self.http.post(f"/save/{quote(note_id, safe='')}", json={"content": content})
        r.raise_for_status()
        return r.json()["version"]

    def close(self) -> None:
        self.http.close()
