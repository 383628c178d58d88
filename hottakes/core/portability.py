"""
Export and import of everything in a board repository as one JSON document.
"""
import logging
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from hottakes.local.repository import BoardRepository
from hottakes.schemas.board import Board
from hottakes.schemas.card import Card
from hottakes.schemas.common import utcnow
from hottakes.schemas.snapshot import Snapshot

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1


class ExportDocument(BaseModel):
    version: int = EXPORT_VERSION
    boards: List[Board]
    cards: List[Card] = Field(default_factory=list)
    snapshots: List[Snapshot] = Field(default_factory=list)
    exported_at: datetime = Field(default_factory=utcnow)


def export_data(repository: BoardRepository) -> str:
    boards = repository.list_boards()
    document = ExportDocument(
        boards=boards,
        cards=[card for board in boards for card in repository.list_cards(board.id)],
        snapshots=[snapshot for board in boards for snapshot in repository.list_snapshots(board.id)],
    )
    return document.model_dump_json(indent=2)


def import_data(repository: BoardRepository, payload: str) -> ExportDocument:
    """Write an exported document into ``repository``.

    Boards and snapshots are upserted by id. Each imported board's cards
    replace the stored ones, re-packed so an edited export with gapped ranks
    still lands as 1..n. Cards of boards missing from the document are
    skipped.
    """
    document = ExportDocument.model_validate_json(payload)
    if document.version > EXPORT_VERSION:
        raise ValueError(f"Unsupported export version {document.version}")

    repository.save_boards(document.boards)
    for board in document.boards:
        cards = sorted((c for c in document.cards if c.board_id == board.id), key=lambda c: c.rank)
        repository.replace_cards(
            board.id,
            [card.model_copy(update={"rank": position}) for position, card in enumerate(cards, start=1)],
        )
    for snapshot in document.snapshots:
        repository.save_snapshot(snapshot)

    logger.info(
        f"Imported {len(document.boards)} boards, {len(document.cards)} cards, "
        f"{len(document.snapshots)} snapshots"
    )
    return document
