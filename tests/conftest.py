from datetime import datetime, timedelta, timezone

import pytest

from hottakes.core.history import SnapshotHistory
from hottakes.core.ranking import RankStore
from hottakes.local.db import create_local_session_factory
from hottakes.local.repository import InMemoryBoardRepository, SqlBoardRepository
from hottakes.schemas.sharing import CloudBoard, SharingPolicy, Visibility


class TickingClock:
    """Returns a strictly later UTC time on every call."""

    def __init__(self, start=datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self):
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def memory_repository():
    return InMemoryBoardRepository()


@pytest.fixture
def sql_repository(tmp_path):
    return SqlBoardRepository(create_local_session_factory(f"sqlite:///{tmp_path / 'local.db'}"))


@pytest.fixture(params=["memory", "sql"])
def repository(request):
    """Runs a test once against each repository implementation."""
    return request.getfixturevalue(f"{request.param}_repository")


@pytest.fixture
def store(repository, clock):
    return RankStore(repository, clock=clock)


@pytest.fixture
def board(store):
    return store.create_board("Love Island S11")


@pytest.fixture
def abc_cards(store, board):
    return [store.create_card(board.id, name) for name in ("A", "B", "C")]


@pytest.fixture
def history(board, repository, clock):
    return SnapshotHistory(board.id, repository, clock=clock)


def make_cloud_board(owner_id="owner", visibility=Visibility.PRIVATE, allowed_friends=(), **fields):
    fields.setdefault("name", "Board")
    return CloudBoard(
        owner_id=owner_id,
        sharing=SharingPolicy(visibility=visibility, allowed_friends=list(allowed_friends)),
        **fields,
    )
