"""
Episode history: frozen ranking snapshots and what can be derived from them.

A snapshot copies the card ranking at capture time (names included), so
renaming or deleting a card later never rewrites history.
"""
import logging
from typing import Callable, List, Optional, Sequence

from hottakes.local.repository import BoardRepository
from hottakes.schemas.card import Card
from hottakes.schemas.common import utcnow
from hottakes.schemas.snapshot import (
    CardTrajectory,
    MovementIndicator,
    RankingEntry,
    Snapshot,
    TrajectoryPoint,
)

logger = logging.getLogger(__name__)

TRAJECTORY_SEPARATOR = "→"
NEW_CARD_SUMMARY = "New"
REMOVED_RANK = -1


class SnapshotHistory:
    """Snapshots of a single board."""

    def __init__(self, board_id: str, repository: BoardRepository, clock: Callable = utcnow):
        self.board_id = board_id
        self.repository = repository
        self._now = clock

    @property
    def snapshots(self) -> List[Snapshot]:
        return sorted(self.repository.list_snapshots(self.board_id), key=lambda s: s.episode_number)

    @property
    def next_episode_number(self) -> int:
        return max((s.episode_number for s in self.snapshots), default=0) + 1

    def get_snapshot(self, snapshot_id: str) -> Optional[Snapshot]:
        snapshot = self.repository.get_snapshot(snapshot_id)
        if snapshot is None or snapshot.board_id != self.board_id:
            return None
        return snapshot

    def create_snapshot(
        self,
        cards: Sequence[Card],
        episode_number: Optional[int] = None,
        label: Optional[str] = None,
        notes: str = "",
    ) -> Snapshot:
        """Capture the current ranking of ``cards`` as a new episode."""
        if episode_number is None:
            episode_number = self.next_episode_number

        rankings = tuple(
            RankingEntry(
                card_id=card.id,
                card_name=card.name,
                card_nickname=card.nickname or None,
                rank=card.rank,
                thumbnail_key=card.thumbnail_key,
            )
            for card in sorted(cards, key=lambda c: c.rank)
        )
        snapshot = Snapshot(
            board_id=self.board_id,
            episode_number=episode_number,
            label=label if label is not None else f"Episode {episode_number}",
            notes=notes,
            rankings=rankings,
            created_at=self._now(),
        )
        self.repository.save_snapshot(snapshot)
        logger.info(f"Saved episode {episode_number} for board {self.board_id} ({len(rankings)} cards)")
        return snapshot

    def update_snapshot(
        self,
        snapshot_id: str,
        label: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Optional[Snapshot]:
        """Edit a snapshot's label or notes. Its rankings cannot change."""
        snapshot = self.get_snapshot(snapshot_id)
        if snapshot is None:
            return None

        changes = {}
        if label is not None:
            changes["label"] = label
        if notes is not None:
            changes["notes"] = notes
        updated = snapshot.model_copy(update=changes)
        self.repository.save_snapshot(updated)
        return updated

    def delete_snapshot(self, snapshot_id: str) -> None:
        if self.get_snapshot(snapshot_id) is None:
            return
        self.repository.delete_snapshot(snapshot_id)
        logger.info(f"Deleted snapshot {snapshot_id} from board {self.board_id}")

    def get_card_trajectory(self, card_id: str, current_cards: Sequence[Card]) -> Optional[CardTrajectory]:
        return card_trajectory(card_id, current_cards, self.snapshots)

    def all_trajectories(self, current_cards: Sequence[Card]) -> List[CardTrajectory]:
        return all_trajectories(current_cards, self.snapshots)

    def movements(self, current_cards: Sequence[Card], baseline: Optional[Snapshot]) -> List[MovementIndicator]:
        return movements(current_cards, baseline)


def card_trajectory(
    card_id: str,
    current_cards: Sequence[Card],
    snapshots: Sequence[Snapshot],
) -> Optional[CardTrajectory]:
    """Rank of a current card in every episode, oldest first.

    Cards no longer on the board have no trajectory.
    """
    card = next((c for c in current_cards if c.id == card_id), None)
    if card is None:
        return None

    points = [
        TrajectoryPoint(episode_number=s.episode_number, rank=s.rank_of(card_id))
        for s in sorted(snapshots, key=lambda s: s.episode_number)
    ]
    known = [str(p.rank) for p in points if p.rank is not None]
    return CardTrajectory(
        card_id=card_id,
        card_name=card.name,
        trajectory=points,
        summary=TRAJECTORY_SEPARATOR.join(known) if known else NEW_CARD_SUMMARY,
    )


def all_trajectories(current_cards: Sequence[Card], snapshots: Sequence[Snapshot]) -> List[CardTrajectory]:
    trajectories = []
    for card in current_cards:
        trajectory = card_trajectory(card.id, current_cards, snapshots)
        if trajectory is not None:
            trajectories.append(trajectory)
    return trajectories


def movements(current_cards: Sequence[Card], baseline: Optional[Snapshot]) -> List[MovementIndicator]:
    """Compare current ranks against a baseline episode.

    ``movement`` is baseline rank minus current rank, so climbing from 3rd to
    1st is +2. Cards only in the baseline come last, flagged ``is_removed``.
    """
    if baseline is None:
        results = [
            MovementIndicator(card_id=card.id, card_name=card.name, current_rank=card.rank)
            for card in current_cards
        ]
        return sorted(results, key=lambda m: m.current_rank)

    remaining = {entry.card_id: entry for entry in baseline.rankings}
    current: List[MovementIndicator] = []
    for card in current_cards:
        entry = remaining.pop(card.id, None)
        if entry is None:
            current.append(
                MovementIndicator(card_id=card.id, card_name=card.name, current_rank=card.rank, is_new=True)
            )
        else:
            current.append(
                MovementIndicator(
                    card_id=card.id,
                    card_name=card.name,
                    current_rank=card.rank,
                    baseline_rank=entry.rank,
                    movement=entry.rank - card.rank,
                )
            )

    removed = [
        MovementIndicator(
            card_id=entry.card_id,
            card_name=entry.card_name,
            current_rank=REMOVED_RANK,
            baseline_rank=entry.rank,
            is_removed=True,
        )
        for entry in remaining.values()
    ]
    return sorted(current, key=lambda m: m.current_rank) + removed
