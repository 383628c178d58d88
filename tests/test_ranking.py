import random

import pytest
from pydantic import ValidationError


def names(cards):
    return [c.name for c in cards]


def ranks(cards):
    return [c.rank for c in cards]


def test_create_card_appends_to_bottom(store, board, abc_cards):
    cards = store.get_cards(board.id)
    assert names(cards) == ["A", "B", "C"]
    assert ranks(cards) == [1, 2, 3]


def test_create_card_on_other_board_starts_at_one(store, board, abc_cards):
    other = store.create_board("Other")
    card = store.create_card(other.id, "X")
    assert card.rank == 1


def test_reorder_moves_last_card_to_top(store, board, abc_cards):
    result = store.reorder_cards(board.id, 2, 0)

    assert [(c.name, c.rank) for c in result] == [("C", 1), ("A", 2), ("B", 3)]
    assert [(c.name, c.rank) for c in store.get_cards(board.id)] == [("C", 1), ("A", 2), ("B", 3)]


def test_reorder_moves_top_card_down(store, board, abc_cards):
    store.reorder_cards(board.id, 0, 2)
    assert names(store.get_cards(board.id)) == ["B", "C", "A"]


def test_reorder_stamps_every_card_with_one_time(store, board, abc_cards):
    before = max(c.updated_at for c in abc_cards)
    result = store.reorder_cards(board.id, 0, 1)

    stamps = {c.updated_at for c in result}
    assert len(stamps) == 1
    assert stamps.pop() > before


def test_reorder_onto_same_index_changes_nothing(store, board, abc_cards):
    before = store.get_cards(board.id)
    result = store.reorder_cards(board.id, 1, 1)

    assert result == before
    assert store.get_cards(board.id) == before


def test_reorder_empty_board_is_noop(store, board):
    assert store.reorder_cards(board.id, 0, 3) == []


@pytest.mark.parametrize("from_index, to_index", [(3, 0), (0, 3), (-1, 0)])
def test_reorder_out_of_range_raises(store, board, abc_cards, from_index, to_index):
    with pytest.raises(IndexError):
        store.reorder_cards(board.id, from_index, to_index)
    assert names(store.get_cards(board.id)) == ["A", "B", "C"]


def test_delete_card_repacks_ranks(store, board, abc_cards):
    a, b, c = abc_cards
    remaining = store.delete_card(b.id)

    assert [(x.name, x.rank) for x in remaining] == [("A", 1), ("C", 2)]
    assert store.get_card(b.id) is None
    assert store.get_cards(board.id) == remaining


def test_delete_card_only_touches_shifted_cards(store, board, abc_cards):
    a, b, c = abc_cards
    store.delete_card(b.id)

    assert store.get_card(a.id).updated_at == a.updated_at
    assert store.get_card(c.id).updated_at > c.updated_at


def test_delete_last_card_leaves_empty_board(store, board):
    card = store.create_card(board.id, "Solo")
    assert store.delete_card(card.id) == []
    assert store.get_cards(board.id) == []


def test_delete_unknown_card_is_ignored(store, board, abc_cards):
    assert store.delete_card("missing") is None
    assert ranks(store.get_cards(board.id)) == [1, 2, 3]


def test_update_card_merges_fields(store, board, abc_cards):
    a = abc_cards[0]
    updated = store.update_card(a.id, nickname="The Villain", notes="Stirred it", metadata={"age": 27})

    assert updated.nickname == "The Villain"
    assert updated.notes == "Stirred it"
    assert updated.metadata == {"age": 27}
    assert updated.name == "A"
    assert updated.rank == 1
    assert updated.updated_at > a.updated_at
    assert store.get_card(a.id) == updated


def test_update_card_rejects_rank(store, board, abc_cards):
    with pytest.raises(ValidationError):
        store.update_card(abc_cards[0].id, rank=3)
    assert store.get_card(abc_cards[0].id).rank == 1


def test_update_card_rejects_board_move(store, board, abc_cards):
    with pytest.raises(ValidationError):
        store.update_card(abc_cards[0].id, board_id="elsewhere")


def test_update_unknown_card_is_ignored(store):
    assert store.update_card("missing", name="X") is None


def test_ranks_stay_contiguous_under_random_edits(store, board):
    rng = random.Random(7)
    for i in range(8):
        store.create_card(board.id, f"card-{i}")

    for step in range(60):
        cards = store.get_cards(board.id)
        action = rng.choice(["add", "delete", "reorder", "reorder"])
        if action == "add" or not cards:
            store.create_card(board.id, f"new-{step}")
        elif action == "delete":
            store.delete_card(rng.choice(cards).id)
        else:
            store.reorder_cards(board.id, rng.randrange(len(cards)), rng.randrange(len(cards)))

        assert ranks(store.get_cards(board.id)) == list(range(1, len(store.get_cards(board.id)) + 1))


# --- Boards --- #


def test_update_board_renames(store, board):
    updated = store.update_board(board.id, name="Love Island S12", cover_image="covers/s12.jpg")

    assert updated.name == "Love Island S12"
    assert updated.cover_image == "covers/s12.jpg"
    assert updated.updated_at > board.updated_at
    assert store.get_board(board.id) == updated


def test_update_board_rejects_unknown_fields(store, board):
    with pytest.raises(ValidationError):
        store.update_board(board.id, owner_id="someone")


def test_update_unknown_board_is_ignored(store):
    assert store.update_board("missing", name="X") is None


def test_soft_delete_and_restore(store, board, abc_cards):
    store.soft_delete_board(board.id)

    assert store.list_boards() == []
    assert [b.id for b in store.deleted_boards()] == [board.id]
    assert [b.id for b in store.list_boards(include_deleted=True)] == [board.id]
    assert store.get_board(board.id).is_deleted
    assert len(store.get_cards(board.id)) == 3

    store.restore_board(board.id)

    assert [b.id for b in store.list_boards()] == [board.id]
    assert store.deleted_boards() == []


def test_permanently_delete_removes_cards_and_snapshots(store, board, abc_cards, history):
    history.create_snapshot(store.get_cards(board.id))
    store.permanently_delete_board(board.id)

    assert store.get_board(board.id) is None
    assert store.get_cards(board.id) == []
    assert history.snapshots == []


@pytest.mark.parametrize("field", ["name", "nickname", "notes", "metadata"])
def test_update_card_rejects_null_in_required_fields(store, board, abc_cards, field):
    a = abc_cards[0]

    with pytest.raises(ValidationError):
        store.update_card(a.id, **{field: None})
    assert store.get_card(a.id) == a


def test_update_card_clears_optional_fields(store, board):
    card = store.create_card(board.id, "Ali", image_key="images/ali.jpg")

    assert store.update_card(card.id, image_key=None).image_key is None
    assert store.get_card(card.id).image_key is None


def test_update_board_rejects_null_name(store, board):
    with pytest.raises(ValidationError):
        store.update_board(board.id, name=None)
    assert store.get_board(board.id) == board
