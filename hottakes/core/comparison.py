"""
Compare two people's rankings of the same item set.

Items are matched by comparison id: the template item id for cards created
from a shared template, otherwise the card's own id. Two boards built from the
same template therefore line up item for item even though every card id
differs.
"""
import math
from typing import Dict, List, Mapping, Optional, Sequence

from hottakes.schemas.board import Board
from hottakes.schemas.card import Card
from hottakes.schemas.comparison import (
    AlignedComparisonItem,
    ComparisonItem,
    ComparisonMatch,
    ComparisonResult,
)
from hottakes.schemas.sharing import CloudBoard

TEMPLATE_ITEM_KEY = "template_item_id"
DEFAULT_FRIEND_NAME = "Friend"


def comparison_id(card: Card) -> str:
    template_item_id = card.metadata.get(TEMPLATE_ITEM_KEY)
    return card.id if template_item_id is None else template_item_id


def to_comparison_items(cards: Sequence[Card]) -> List[ComparisonItem]:
    return [
        ComparisonItem(
            id=comparison_id(card),
            name=card.name,
            rank=card.rank,
            image_url=card.thumbnail_key,
        )
        for card in cards
    ]


def calculate_agreement(items_a: Sequence[ComparisonItem], items_b: Sequence[ComparisonItem]) -> int:
    """Agreement between two rankings as an integer percentage (0-100).

    Each item ranked on both sides scores ``1 - |rank_a - rank_b| / n``, where
    ``n`` is the number of ranked items in the longer list, floored at 0. The
    result is the mean score over shared items. ``n`` is a count, not the
    largest rank value.
    """
    ranks_a = {item.id: item.rank for item in items_a if item.rank is not None}
    ranks_b = {item.id: item.rank for item in items_b if item.rank is not None}
    if not ranks_a or not ranks_b:
        return 0

    common_ids = [item_id for item_id in ranks_a if item_id in ranks_b]
    if not common_ids:
        return 0

    normalizer = max(len(ranks_a), len(ranks_b))
    total = sum(
        max(0.0, 1 - abs(ranks_a[item_id] - ranks_b[item_id]) / normalizer)
        for item_id in common_ids
    )
    # Half-up rounding; round() would send 50.5 to 50
    return int(math.floor(total / len(common_ids) * 100 + 0.5))


def _sort_key(item: AlignedComparisonItem) -> float:
    if item.your_rank is not None and item.friend_rank is not None:
        return (item.your_rank + item.friend_rank) / 2
    if item.your_rank is not None:
        return item.your_rank
    if item.friend_rank is not None:
        return item.friend_rank
    return math.inf


def align_items_for_comparison(
    your_items: Sequence[ComparisonItem],
    friend_items: Sequence[ComparisonItem],
) -> List[AlignedComparisonItem]:
    """One row per item on either side, best average rank first."""
    yours: Dict[str, ComparisonItem] = {item.id: item for item in your_items}
    friends: Dict[str, ComparisonItem] = {item.id: item for item in friend_items}

    aligned = []
    for item_id in {**yours, **friends}:
        mine = yours.get(item_id)
        theirs = friends.get(item_id)
        source = mine or theirs
        aligned.append(
            AlignedComparisonItem(
                id=item_id,
                name=source.name,
                your_rank=mine.rank if mine else None,
                friend_rank=theirs.rank if theirs else None,
                your_image_url=mine.image_url if mine else None,
                friend_image_url=theirs.image_url if theirs else None,
            )
        )
    return sorted(aligned, key=_sort_key)


def compare_boards(your_cards: Sequence[Card], friend_cards: Sequence[Card]) -> ComparisonResult:
    your_items = to_comparison_items(your_cards)
    friend_items = to_comparison_items(friend_cards)
    return ComparisonResult(
        your_items=your_items,
        friend_items=friend_items,
        aligned_items=align_items_for_comparison(your_items, friend_items),
        agreement_percentage=calculate_agreement(your_items, friend_items),
    )


# --- Finding boards worth comparing --- #


def are_template_matching(template_a: Optional[str], template_b: Optional[str]) -> bool:
    if not template_a or not template_b:
        return False
    return template_a == template_b


def are_titles_matching(title_a: str, title_b: str) -> bool:
    return title_a.strip().lower() == title_b.strip().lower()


def find_comparison_matches(
    your_boards: Sequence[Board],
    friend_boards: Sequence[CloudBoard],
    friend_names: Optional[Mapping[str, str]] = None,
) -> List[ComparisonMatch]:
    """Pair each of your live boards with friend boards on the same template,
    falling back to an exact (case-insensitive) title match."""
    friend_names = friend_names or {}
    matches = []
    for board in your_boards:
        if board.deleted_at is not None:
            continue
        for friend_board in friend_boards:
            if are_template_matching(board.template_id, friend_board.template_id):
                match_type = "template"
            elif are_titles_matching(board.name, friend_board.name):
                match_type = "title"
            else:
                continue
            matches.append(
                ComparisonMatch(
                    your_board=board,
                    friend_board=friend_board,
                    match_type=match_type,
                    friend_id=friend_board.owner_id,
                    friend_name=friend_names.get(friend_board.owner_id, DEFAULT_FRIEND_NAME),
                )
            )
    return matches
