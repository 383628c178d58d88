from typing import List, Literal, Optional
from pydantic import BaseModel

from hottakes.schemas.board import Board
from hottakes.schemas.sharing import CloudBoard


class ComparisonItem(BaseModel):
    id: str  # template item id when templated, else card id
    name: str
    rank: Optional[int] = None
    image_url: Optional[str] = None


class AlignedComparisonItem(BaseModel):
    id: str
    name: str
    your_rank: Optional[int] = None
    friend_rank: Optional[int] = None
    your_image_url: Optional[str] = None
    friend_image_url: Optional[str] = None


class ComparisonResult(BaseModel):
    your_items: List[ComparisonItem]
    friend_items: List[ComparisonItem]
    aligned_items: List[AlignedComparisonItem]
    agreement_percentage: int


class ComparisonMatch(BaseModel):
    your_board: Board
    friend_board: CloudBoard
    match_type: Literal["template", "title"]
    friend_id: str
    friend_name: str
