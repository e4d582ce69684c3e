from typing import Any

from pydantic import BaseModel


class ImportIn(BaseModel):
    # shape of `notes` is checked by BackupService
    notes: Any = None
    merge: bool = True
