from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from hottakes.schemas.board import Board
from hottakes.schemas.common import utcnow


class Visibility(str, Enum):
    PRIVATE = "private"
    FRIENDS = "friends"
    SPECIFIC = "specific"  # only ids in allowed_friends
    PUBLIC = "public"


class SharingPolicy(BaseModel):
    visibility: Visibility = Visibility.PRIVATE
    allowed_friends: List[str] = Field(default_factory=list)
    public_link_enabled: bool = False
    public_link_id: Optional[str] = None


class SharingUpdate(BaseModel):
    visibility: Optional[Visibility] = None
    allowed_friends: Optional[List[str]] = None
    public_link_enabled: Optional[bool] = None

    class Config:
        extra = "forbid"

    @field_validator("*")
    @classmethod
    def reject_null(cls, value):
        # Omit a field to leave it unchanged; null is not a setting
        if value is None:
            raise ValueError("may not be null")
        return value


class CloudBoard(Board):
    """Remote record: board fields plus ownership and sharing."""
    owner_id: str
    sharing: SharingPolicy = Field(default_factory=SharingPolicy)
    synced_at: datetime = Field(default_factory=utcnow)
