import logging
from typing import List, Optional, Tuple

from hottakes.core.comparison import TEMPLATE_ITEM_KEY
from hottakes.core.ranking import RankStore
from hottakes.schemas.board import Board
from hottakes.schemas.card import Card
from hottakes.schemas.template import BoardTemplate

logger = logging.getLogger(__name__)


def create_board_from_template(
    store: RankStore,
    template: BoardTemplate,
    name: Optional[str] = None,
) -> Tuple[Board, List[Card]]:
    """Create a board pre-filled with the template's items, in template order.

    Each card remembers its template item id so that boards made from the
    same template can be compared item for item.
    """
    if not template.is_active:
        raise ValueError(f"Template {template.id} is not active")

    board = store.create_board(name or template.name, template_id=template.id)
    cards = [
        store.create_card(board.id, item.name, metadata={TEMPLATE_ITEM_KEY: item.id})
        for item in template.items
    ]
    logger.info(f"Created board {board.id} from template {template.id} with {len(cards)} cards")
    return board, cards
