from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from hottakes.schemas.common import new_id, utcnow


class Board(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    cover_image: Optional[str] = None
    template_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    deleted_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class BoardUpdate(BaseModel):
    name: Optional[str] = None
    cover_image: Optional[str] = None
    template_id: Optional[str] = None
    deleted_at: Optional[datetime] = None

    class Config:
        extra = "forbid"
