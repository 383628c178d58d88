import pytest
from pydantic import ValidationError

from hottakes.core.history import SnapshotHistory, movements
from hottakes.schemas.snapshot import Snapshot


def test_episode_numbers_count_up(history, store, board, abc_cards):
    first = history.create_snapshot(store.get_cards(board.id))
    second = history.create_snapshot(store.get_cards(board.id))

    assert (first.episode_number, second.episode_number) == (1, 2)
    assert first.label == "Episode 1"
    assert history.next_episode_number == 3


def test_explicit_episode_number_moves_the_counter(history, store, board, abc_cards):
    history.create_snapshot(store.get_cards(board.id), episode_number=5, label="Recoupling")

    assert history.snapshots[0].label == "Recoupling"
    assert history.next_episode_number == 6


def test_snapshot_copies_ranking_in_rank_order(history, store, board, abc_cards):
    store.reorder_cards(board.id, 2, 0)
    snapshot = history.create_snapshot(list(reversed(store.get_cards(board.id))))

    assert [(e.card_name, e.rank) for e in snapshot.rankings] == [("C", 1), ("A", 2), ("B", 3)]


def test_snapshot_is_unaffected_by_later_edits(history, store, board, abc_cards):
    a, b, c = abc_cards
    snapshot = history.create_snapshot(store.get_cards(board.id))

    store.update_card(a.id, name="Renamed")
    store.reorder_cards(board.id, 0, 2)
    store.delete_card(b.id)

    stored = history.get_snapshot(snapshot.id)
    assert [(e.card_name, e.rank) for e in stored.rankings] == [("A", 1), ("B", 2), ("C", 3)]
    assert stored.rank_of(a.id) == 1


def test_snapshot_model_is_immutable(history, store, board, abc_cards):
    snapshot = history.create_snapshot(store.get_cards(board.id))
    with pytest.raises(ValidationError):
        snapshot.label = "Changed"


def test_update_snapshot_edits_label_and_notes_only(history, store, board, abc_cards):
    snapshot = history.create_snapshot(store.get_cards(board.id))
    updated = history.update_snapshot(snapshot.id, label="Final", notes="What a season")

    assert updated.label == "Final"
    assert updated.notes == "What a season"
    assert updated.rankings == snapshot.rankings
    assert history.get_snapshot(snapshot.id) == updated


def test_update_unknown_snapshot_is_ignored(history):
    assert history.update_snapshot("missing", label="X") is None


def test_delete_snapshot(history, store, board, abc_cards):
    snapshot = history.create_snapshot(store.get_cards(board.id))
    history.delete_snapshot(snapshot.id)

    assert history.snapshots == []
    assert history.next_episode_number == 1


def test_history_is_scoped_to_its_board(history, store, board, repository, clock):
    other = store.create_board("Other")
    store.create_card(other.id, "X")

    other_history = SnapshotHistory(other.id, repository, clock=clock)
    foreign = other_history.create_snapshot(store.get_cards(other.id))

    assert history.snapshots == []
    assert history.get_snapshot(foreign.id) is None
    history.delete_snapshot(foreign.id)
    assert other_history.get_snapshot(foreign.id) is not None


# --- Trajectories --- #


def test_trajectory_follows_rank_across_episodes(history, store, board, abc_cards):
    a, b, c = abc_cards
    history.create_snapshot(store.get_cards(board.id))
    store.reorder_cards(board.id, 2, 0)
    history.create_snapshot(store.get_cards(board.id))

    trajectory = history.get_card_trajectory(c.id, store.get_cards(board.id))

    assert trajectory.card_name == "C"
    assert [(p.episode_number, p.rank) for p in trajectory.trajectory] == [(1, 3), (2, 1)]
    assert trajectory.summary == "3→1"


def test_trajectory_skips_missing_episodes_in_summary(history, store, board):
    history.create_snapshot([])
    card = store.create_card(board.id, "Late arrival")
    history.create_snapshot(store.get_cards(board.id))

    trajectory = history.get_card_trajectory(card.id, store.get_cards(board.id))

    assert [p.rank for p in trajectory.trajectory] == [None, 1]
    assert trajectory.summary == "1"


def test_card_never_captured_is_new(history, store, board, abc_cards):
    history.create_snapshot(store.get_cards(board.id))
    fresh = store.create_card(board.id, "D")

    trajectory = history.get_card_trajectory(fresh.id, store.get_cards(board.id))

    assert trajectory.summary == "New"
    assert [p.rank for p in trajectory.trajectory] == [None]


def test_trajectory_without_snapshots_is_new(history, store, board, abc_cards):
    trajectory = history.get_card_trajectory(abc_cards[0].id, store.get_cards(board.id))
    assert trajectory.trajectory == []
    assert trajectory.summary == "New"


def test_trajectory_of_removed_card_is_none(history, store, board, abc_cards):
    history.create_snapshot(store.get_cards(board.id))
    store.delete_card(abc_cards[0].id)

    assert history.get_card_trajectory(abc_cards[0].id, store.get_cards(board.id)) is None


def test_all_trajectories_follow_current_card_order(history, store, board, abc_cards):
    history.create_snapshot(store.get_cards(board.id))
    current = list(reversed(store.get_cards(board.id)))

    assert [t.card_name for t in history.all_trajectories(current)] == ["C", "B", "A"]


# --- Movement --- #


def test_movement_is_baseline_minus_current(history, store, board, abc_cards):
    a, b, c = abc_cards
    baseline = history.create_snapshot(store.get_cards(board.id))
    store.reorder_cards(board.id, 2, 0)

    result = history.movements(store.get_cards(board.id), baseline)

    assert [(m.card_name, m.current_rank, m.baseline_rank, m.movement) for m in result] == [
        ("C", 1, 3, 2),
        ("A", 2, 1, -1),
        ("B", 3, 2, -1),
    ]


def test_movement_flags_new_and_removed_cards(history, store, board, abc_cards):
    a, b, c = abc_cards
    baseline = history.create_snapshot(store.get_cards(board.id))
    store.delete_card(a.id)
    store.create_card(board.id, "D")

    result = history.movements(store.get_cards(board.id), baseline)

    assert [m.card_name for m in result] == ["B", "C", "D", "A"]
    new, removed = result[2], result[3]
    assert new.is_new and new.movement is None and new.baseline_rank is None
    assert removed.is_removed
    assert removed.current_rank == -1
    assert removed.baseline_rank == 1
    assert removed.movement is None


def test_movement_without_baseline_is_neutral(store, board, abc_cards):
    result = movements(list(reversed(store.get_cards(board.id))), None)

    assert [m.card_name for m in result] == ["A", "B", "C"]
    assert all(m.movement is None and not m.is_new and not m.is_removed for m in result)


def test_movement_against_empty_baseline_marks_everything_new(store, board, abc_cards):
    baseline = Snapshot(board_id=board.id, episode_number=1, label="Episode 1")
    result = movements(store.get_cards(board.id), baseline)

    assert all(m.is_new for m in result)
