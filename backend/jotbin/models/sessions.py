from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    note_id: Optional[str] = Field(default=None, alias="noteId")
