from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    content: Optional[str] = None
    encrypted: Optional[bool] = None
    password_hash: Optional[str] = Field(default=None, alias="passwordHash")
    metadata: Optional[dict[str, Any]] = None


class NotePatch(BaseModel):
    """Partial update. A field left out of the body is untouched; a field sent
    as null overwrites."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    content: Optional[str] = None
    encrypted: Optional[bool] = None
    password_hash: Optional[str] = Field(default=None, alias="passwordHash")
    metadata: Optional[dict[str, Any]] = None

    def to_patch(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}


class VerifyIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    password_hash: Optional[str] = Field(default=None, alias="passwordHash")


class SaveIn(BaseModel):
    # checked by the store so a non-string is a 400, not a 422
    content: Any = None
