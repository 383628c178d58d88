"""
Board and card ranking store.

Ranks are 1-indexed positions and, for any board, always form exactly
1..n. Every mutation that moves more than one rank rewrites the whole board's
card set through ``BoardRepository.replace_cards`` in one unit of work.

Mutations addressed to an unknown id are ignored (they return ``None``):
late UI events for a card that was just deleted are expected.
"""
import logging
from typing import Any, Callable, List, Optional

from hottakes.local.repository import BoardRepository
from hottakes.schemas.board import Board, BoardUpdate
from hottakes.schemas.card import Card, CardUpdate, ImageCrop
from hottakes.schemas.common import utcnow

logger = logging.getLogger(__name__)


class RankStore:
    def __init__(self, repository: BoardRepository, clock: Callable = utcnow):
        self.repository = repository
        self._now = clock

    # --- Boards --- #

    def create_board(
        self,
        name: str,
        cover_image: Optional[str] = None,
        template_id: Optional[str] = None,
    ) -> Board:
        now = self._now()
        board = Board(
            name=name,
            cover_image=cover_image,
            template_id=template_id,
            created_at=now,
            updated_at=now,
        )
        self.repository.save_board(board)
        logger.info(f"Created board {board.id} ('{name}')")
        return board

    def get_board(self, board_id: str) -> Optional[Board]:
        return self.repository.get_board(board_id)

    def list_boards(self, include_deleted: bool = False) -> List[Board]:
        boards = self.repository.list_boards()
        if include_deleted:
            return boards
        return [b for b in boards if b.deleted_at is None]

    def deleted_boards(self) -> List[Board]:
        """Soft-deleted boards awaiting restore or permanent deletion."""
        return [b for b in self.repository.list_boards() if b.deleted_at is not None]

    def update_board(self, board_id: str, **changes: Any) -> Optional[Board]:
        update = BoardUpdate(**changes)
        board = self.repository.get_board(board_id)
        if board is None:
            logger.debug(f"update_board: board {board_id} not found, ignoring")
            return None

        # Validate the merged board; null in a required field raises ValidationError
        updated = Board.model_validate(
            {**board.model_dump(), **update.model_dump(exclude_unset=True), "updated_at": self._now()}
        )
        self.repository.save_board(updated)
        return updated

    def soft_delete_board(self, board_id: str) -> Optional[Board]:
        """Hide a board; its cards and snapshots are kept for restore."""
        return self.update_board(board_id, deleted_at=self._now())

    def restore_board(self, board_id: str) -> Optional[Board]:
        return self.update_board(board_id, deleted_at=None)

    def permanently_delete_board(self, board_id: str) -> None:
        self.repository.purge_board(board_id)
        logger.info(f"Permanently deleted board {board_id}")

    # --- Cards --- #

    def get_cards(self, board_id: str) -> List[Card]:
        return sorted(self.repository.list_cards(board_id), key=lambda c: c.rank)

    def get_card(self, card_id: str) -> Optional[Card]:
        return self.repository.get_card(card_id)

    def create_card(
        self,
        board_id: str,
        name: str,
        image_key: Optional[str] = None,
        thumbnail_key: Optional[str] = None,
        nickname: str = "",
        notes: str = "",
        image_crop: Optional[ImageCrop] = None,
        metadata: Optional[dict] = None,
    ) -> Card:
        """Append a new card at the bottom of the board."""
        now = self._now()
        card = Card(
            board_id=board_id,
            name=name,
            nickname=nickname,
            image_key=image_key,
            thumbnail_key=thumbnail_key,
            image_crop=image_crop,
            notes=notes,
            metadata=metadata or {},
            rank=len(self.repository.list_cards(board_id)) + 1,
            created_at=now,
            updated_at=now,
        )
        self.repository.save_card(card)
        logger.info(f"Created card {card.id} on board {board_id} at rank {card.rank}")
        return card

    def update_card(self, card_id: str, **changes: Any) -> Optional[Card]:
        """Merge ``changes`` into a card. Rank and board are not editable here."""
        update = CardUpdate(**changes)
        card = self.repository.get_card(card_id)
        if card is None:
            logger.debug(f"update_card: card {card_id} not found, ignoring")
            return None

        fields = {key: getattr(update, key) for key in update.model_fields_set}
        updated = Card.model_validate({**card.model_dump(), **fields, "updated_at": self._now()})
        self.repository.save_card(updated)
        return updated

    def delete_card(self, card_id: str) -> Optional[List[Card]]:
        """Remove a card and close the gap it leaves in the ranking.

        Returns the board's remaining cards, re-packed from rank 1.
        """
        card = self.repository.get_card(card_id)
        if card is None:
            logger.debug(f"delete_card: card {card_id} not found, ignoring")
            return None

        now = self._now()
        remaining = [c for c in self.get_cards(card.board_id) if c.id != card_id]
        repacked = [
            c if c.rank == position else c.model_copy(update={"rank": position, "updated_at": now})
            for position, c in enumerate(remaining, start=1)
        ]
        self.repository.replace_cards(card.board_id, repacked)
        logger.info(f"Deleted card {card_id}; {len(repacked)} cards left on board {card.board_id}")
        return repacked

    def reorder_cards(self, board_id: str, from_index: int, to_index: int) -> List[Card]:
        """Move the card at ``from_index`` to ``to_index`` in the rank-sorted list.

        Every card is renumbered to position + 1 and stamped with the same
        ``updated_at``. Moving a card onto itself changes nothing.
        """
        cards = self.get_cards(board_id)
        if from_index == to_index or not cards:
            return cards

        for index in (from_index, to_index):
            if not 0 <= index < len(cards):
                raise IndexError(f"Index {index} out of range for board {board_id} with {len(cards)} cards")

        moved = cards.pop(from_index)
        cards.insert(to_index, moved)

        now = self._now()
        reordered = [
            card.model_copy(update={"rank": position, "updated_at": now})
            for position, card in enumerate(cards, start=1)
        ]
        self.repository.replace_cards(board_id, reordered)
        logger.info(f"Moved card {moved.id} on board {board_id} from {from_index} to {to_index}")
        return reordered
