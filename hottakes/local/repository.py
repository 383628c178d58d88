"""
Board persistence behind an injected repository.

The ranking engine never talks to a storage engine directly: it is handed a
``BoardRepository`` and calls explicit load/save methods on it. Every write
method is one unit of work, so a reorder or a delete-and-repack is never
observable half-applied.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from sqlalchemy import delete, select

from hottakes.local.db import BoardRow, CardRow, SnapshotRow
from hottakes.schemas.board import Board
from hottakes.schemas.card import Card, ImageCrop
from hottakes.schemas.common import as_utc
from hottakes.schemas.snapshot import RankingEntry, Snapshot

logger = logging.getLogger(__name__)


class BoardRepository(ABC):
    # --- Boards --- #
    @abstractmethod
    def list_boards(self) -> List[Board]: ...

    @abstractmethod
    def get_board(self, board_id: str) -> Optional[Board]: ...

    @abstractmethod
    def save_board(self, board: Board) -> None: ...

    @abstractmethod
    def save_boards(self, boards: Iterable[Board]) -> None: ...

    @abstractmethod
    def purge_board(self, board_id: str) -> None:
        """Remove a board together with its cards and snapshots."""

    # --- Cards --- #
    @abstractmethod
    def list_cards(self, board_id: str) -> List[Card]:
        """Cards of one board, sorted by rank."""

    @abstractmethod
    def get_card(self, card_id: str) -> Optional[Card]: ...

    @abstractmethod
    def save_card(self, card: Card) -> None: ...

    @abstractmethod
    def replace_cards(self, board_id: str, cards: List[Card]) -> None:
        """Make ``cards`` the complete card set of the board, atomically."""

    # --- Snapshots --- #
    @abstractmethod
    def list_snapshots(self, board_id: str) -> List[Snapshot]:
        """Snapshots of one board, ascending by episode number."""

    @abstractmethod
    def get_snapshot(self, snapshot_id: str) -> Optional[Snapshot]: ...

    @abstractmethod
    def save_snapshot(self, snapshot: Snapshot) -> None: ...

    @abstractmethod
    def delete_snapshot(self, snapshot_id: str) -> None: ...


class InMemoryBoardRepository(BoardRepository):
    """Dictionary-backed repository for tests and signed-out sessions."""

    def __init__(self):
        self.boards: Dict[str, Board] = {}
        self.cards: Dict[str, Card] = {}
        self.snapshots: Dict[str, Snapshot] = {}

    def list_boards(self) -> List[Board]:
        return list(self.boards.values())

    def get_board(self, board_id: str) -> Optional[Board]:
        return self.boards.get(board_id)

    def save_board(self, board: Board) -> None:
        self.boards[board.id] = board

    def save_boards(self, boards: Iterable[Board]) -> None:
        # Build first, then swap, so readers see old or new state only
        updated = dict(self.boards)
        for board in boards:
            updated[board.id] = board
        self.boards = updated

    def purge_board(self, board_id: str) -> None:
        self.boards.pop(board_id, None)
        self.cards = {k: c for k, c in self.cards.items() if c.board_id != board_id}
        self.snapshots = {k: s for k, s in self.snapshots.items() if s.board_id != board_id}

    def list_cards(self, board_id: str) -> List[Card]:
        return sorted(
            (c for c in self.cards.values() if c.board_id == board_id),
            key=lambda c: c.rank,
        )

    def get_card(self, card_id: str) -> Optional[Card]:
        return self.cards.get(card_id)

    def save_card(self, card: Card) -> None:
        self.cards[card.id] = card

    def replace_cards(self, board_id: str, cards: List[Card]) -> None:
        updated = {k: c for k, c in self.cards.items() if c.board_id != board_id}
        for card in cards:
            updated[card.id] = card
        self.cards = updated

    def list_snapshots(self, board_id: str) -> List[Snapshot]:
        return sorted(
            (s for s in self.snapshots.values() if s.board_id == board_id),
            key=lambda s: s.episode_number,
        )

    def get_snapshot(self, snapshot_id: str) -> Optional[Snapshot]:
        return self.snapshots.get(snapshot_id)

    def save_snapshot(self, snapshot: Snapshot) -> None:
        self.snapshots[snapshot.id] = snapshot

    def delete_snapshot(self, snapshot_id: str) -> None:
        self.snapshots.pop(snapshot_id, None)


class SqlBoardRepository(BoardRepository):
    """SQLAlchemy-backed repository for the on-device database."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    # --- Boards --- #
    def list_boards(self) -> List[Board]:
        with self._session_factory() as session:
            rows = session.scalars(select(BoardRow).order_by(BoardRow.created_at)).all()
            return [_row_to_board(row) for row in rows]

    def get_board(self, board_id: str) -> Optional[Board]:
        with self._session_factory() as session:
            row = session.get(BoardRow, board_id)
            return _row_to_board(row) if row else None

    def save_board(self, board: Board) -> None:
        self.save_boards([board])

    def save_boards(self, boards: Iterable[Board]) -> None:
        with self._session_factory.begin() as session:
            for board in boards:
                session.merge(_board_to_row(board))

    def purge_board(self, board_id: str) -> None:
        with self._session_factory.begin() as session:
            session.execute(delete(CardRow).where(CardRow.board_id == board_id))
            session.execute(delete(SnapshotRow).where(SnapshotRow.board_id == board_id))
            session.execute(delete(BoardRow).where(BoardRow.id == board_id))
        logger.info(f"Purged board {board_id} from local store")

    # --- Cards --- #
    def list_cards(self, board_id: str) -> List[Card]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(CardRow).where(CardRow.board_id == board_id).order_by(CardRow.rank)
            ).all()
            return [_row_to_card(row) for row in rows]

    def get_card(self, card_id: str) -> Optional[Card]:
        with self._session_factory() as session:
            row = session.get(CardRow, card_id)
            return _row_to_card(row) if row else None

    def save_card(self, card: Card) -> None:
        with self._session_factory.begin() as session:
            session.merge(_card_to_row(card))

    def replace_cards(self, board_id: str, cards: List[Card]) -> None:
        keep = [card.id for card in cards]
        with self._session_factory.begin() as session:
            session.execute(
                delete(CardRow).where(CardRow.board_id == board_id, CardRow.id.notin_(keep))
            )
            for card in cards:
                session.merge(_card_to_row(card))

    # --- Snapshots --- #
    def list_snapshots(self, board_id: str) -> List[Snapshot]:
        with self._session_factory() as session:
            rows = session.scalars(
                select(SnapshotRow)
                .where(SnapshotRow.board_id == board_id)
                .order_by(SnapshotRow.episode_number, SnapshotRow.created_at)
            ).all()
            return [_row_to_snapshot(row) for row in rows]

    def get_snapshot(self, snapshot_id: str) -> Optional[Snapshot]:
        with self._session_factory() as session:
            row = session.get(SnapshotRow, snapshot_id)
            return _row_to_snapshot(row) if row else None

    def save_snapshot(self, snapshot: Snapshot) -> None:
        with self._session_factory.begin() as session:
            session.merge(
                SnapshotRow(
                    id=snapshot.id,
                    board_id=snapshot.board_id,
                    episode_number=snapshot.episode_number,
                    label=snapshot.label,
                    notes=snapshot.notes,
                    rankings=[entry.model_dump() for entry in snapshot.rankings],
                    created_at=snapshot.created_at,
                )
            )

    def delete_snapshot(self, snapshot_id: str) -> None:
        with self._session_factory.begin() as session:
            session.execute(delete(SnapshotRow).where(SnapshotRow.id == snapshot_id))


def _board_to_row(board: Board) -> BoardRow:
    return BoardRow(
        id=board.id,
        name=board.name,
        cover_image=board.cover_image,
        template_id=board.template_id,
        created_at=board.created_at,
        updated_at=board.updated_at,
        deleted_at=board.deleted_at,
    )


def _row_to_board(row: BoardRow) -> Board:
    return Board(
        id=row.id,
        name=row.name,
        cover_image=row.cover_image,
        template_id=row.template_id,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        deleted_at=as_utc(row.deleted_at),
    )


def _card_to_row(card: Card) -> CardRow:
    return CardRow(
        id=card.id,
        board_id=card.board_id,
        name=card.name,
        nickname=card.nickname,
        image_key=card.image_key,
        thumbnail_key=card.thumbnail_key,
        image_crop=card.image_crop.model_dump() if card.image_crop else None,
        notes=card.notes,
        extra=dict(card.metadata),
        rank=card.rank,
        created_at=card.created_at,
        updated_at=card.updated_at,
    )


def _row_to_card(row: CardRow) -> Card:
    return Card(
        id=row.id,
        board_id=row.board_id,
        name=row.name,
        nickname=row.nickname or "",
        image_key=row.image_key,
        thumbnail_key=row.thumbnail_key,
        image_crop=ImageCrop(**row.image_crop) if row.image_crop else None,
        notes=row.notes or "",
        metadata=dict(row.extra or {}),
        rank=row.rank,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def _row_to_snapshot(row: SnapshotRow) -> Snapshot:
    return Snapshot(
        id=row.id,
        board_id=row.board_id,
        episode_number=row.episode_number,
        label=row.label,
        notes=row.notes or "",
        rankings=tuple(RankingEntry(**entry) for entry in row.rankings or []),
        created_at=as_utc(row.created_at),
    )
