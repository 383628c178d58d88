from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from hottakes.schemas.common import new_id, utcnow


class ImageCrop(BaseModel):
    x: float = 0.5  # pan offset, 0-1
    y: float = 0.5
    scale: float = 1.0  # 1 = fit


class Card(BaseModel):
    id: str = Field(default_factory=new_id)
    board_id: str
    name: str
    nickname: str = ""
    image_key: Optional[str] = None
    thumbnail_key: Optional[str] = None
    image_crop: Optional[ImageCrop] = None
    notes: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)
    rank: int = Field(ge=1)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class CardUpdate(BaseModel):
    """Fields a caller may change on an existing card.

    rank moves only through reorder/delete, and board_id is fixed at creation.
    """
    name: Optional[str] = None
    nickname: Optional[str] = None
    image_key: Optional[str] = None
    thumbnail_key: Optional[str] = None
    image_crop: Optional[ImageCrop] = None
    notes: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    class Config:
        extra = "forbid"
