from datetime import datetime
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field

from hottakes.schemas.common import new_id, utcnow


class RankingEntry(BaseModel):
    card_id: str
    card_name: str
    card_nickname: Optional[str] = None
    rank: int
    thumbnail_key: Optional[str] = None

    class Config:
        frozen = True


class Snapshot(BaseModel):
    id: str = Field(default_factory=new_id)
    board_id: str
    episode_number: int = Field(ge=1)
    label: str
    notes: str = ""
    rankings: Tuple[RankingEntry, ...] = ()
    created_at: datetime = Field(default_factory=utcnow)

    class Config:
        frozen = True

    def rank_of(self, card_id: str) -> Optional[int]:
        for entry in self.rankings:
            if entry.card_id == card_id:
                return entry.rank
        return None


class TrajectoryPoint(BaseModel):
    episode_number: int
    rank: Optional[int] = None  # None when the card is missing from that episode


class CardTrajectory(BaseModel):
    card_id: str
    card_name: str
    trajectory: List[TrajectoryPoint]
    summary: str  # e.g. "3→1→2→1"


class MovementIndicator(BaseModel):
    card_id: str
    card_name: str
    current_rank: int  # -1 for removed cards
    baseline_rank: Optional[int] = None
    movement: Optional[int] = None  # positive = moved up
    is_new: bool = False
    is_removed: bool = False
