"""
Offline-first board sync.

The device is the single writer for its boards: when a board exists both
locally and remotely the local copy wins outright, with no timestamp
comparison and no field-level merge. Repeating a sync converges to the same
result, so a failed sync is retried as a whole.
"""
import logging
from enum import Enum
from typing import Callable, List, Optional, Sequence

from hottakes.core.remote import RemoteBoardStore
from hottakes.schemas.board import Board
from hottakes.schemas.common import utcnow
from hottakes.schemas.sharing import CloudBoard, SharingPolicy

logger = logging.getLogger(__name__)


class SyncStatus(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    SYNCED = "synced"
    ERROR = "error"


def merge_one(local: Optional[Board], remote: Optional[Board]) -> Board:
    if local is None and remote is None:
        raise ValueError("Cannot merge: both boards are missing")
    if local is None:
        return remote
    return local


def merge_many(locals_: Sequence[Board], remotes: Sequence[Board]) -> List[Board]:
    """Outer-join both sides by id; ids on both sides resolve via ``merge_one``."""
    local_by_id = {board.id: board for board in locals_}
    remote_by_id = {board.id: board for board in remotes}
    return [
        merge_one(local_by_id.get(board_id), remote_by_id.get(board_id))
        for board_id in {**local_by_id, **remote_by_id}
    ]


def to_cloud_board(
    board: Board,
    owner_id: str,
    sharing: Optional[SharingPolicy] = None,
    synced_at=None,
) -> CloudBoard:
    return CloudBoard(
        id=board.id,
        name=board.name,
        cover_image=board.cover_image,
        template_id=board.template_id,
        created_at=board.created_at,
        updated_at=board.updated_at,
        deleted_at=board.deleted_at,
        owner_id=owner_id,
        sharing=sharing or SharingPolicy(),
        synced_at=synced_at or utcnow(),
    )


def from_cloud_board(cloud_board: CloudBoard) -> Board:
    """Strip the cloud-only fields."""
    return Board(
        id=cloud_board.id,
        name=cloud_board.name,
        cover_image=cloud_board.cover_image,
        template_id=cloud_board.template_id,
        created_at=cloud_board.created_at,
        updated_at=cloud_board.updated_at,
        deleted_at=cloud_board.deleted_at,
    )


class SyncMerger:
    """Runs syncs against a remote store and remembers how the last one went."""

    def __init__(self, remote: RemoteBoardStore, clock: Callable = utcnow):
        self.remote = remote
        self._now = clock
        self.status = SyncStatus.IDLE
        self.error: Optional[str] = None
        self.last_synced_at = None

    @property
    def is_syncing(self) -> bool:
        return self.status == SyncStatus.SYNCING

    def clear_error(self) -> None:
        self.error = None
        self.status = SyncStatus.IDLE

    async def full_sync(self, locals_: Sequence[Board], owner_id: Optional[str]) -> List[Board]:
        """Fetch, merge (local wins), push, and return the merged boards.

        Remote errors propagate unchanged; nothing local has been written by
        then, so the caller keeps its boards and may retry the whole sync.
        """
        if not owner_id:
            return list(locals_)

        self._start()
        try:
            cloud_boards = await self.remote.fetch_boards(owner_id)
            merged = merge_many(locals_, [from_cloud_board(b) for b in cloud_boards])
            now = self._now()
            await self.remote.push_boards([to_cloud_board(b, owner_id, synced_at=now) for b in merged])
        except Exception as e:
            self._fail(e)
            raise

        self._finish()
        logger.info(
            f"Synced {len(merged)} boards for {owner_id} "
            f"({len(locals_)} local, {len(cloud_boards)} remote)"
        )
        return merged

    async def sync_board(self, board: Board, owner_id: Optional[str]) -> None:
        """Push a single board after a local edit."""
        if not owner_id:
            return

        self._start()
        try:
            await self.remote.push_boards([to_cloud_board(board, owner_id, synced_at=self._now())])
        except Exception as e:
            self._fail(e)
            raise
        self._finish()

    def _start(self) -> None:
        self.status = SyncStatus.SYNCING
        self.error = None

    def _finish(self) -> None:
        self.status = SyncStatus.SYNCED
        self.last_synced_at = self._now()

    def _fail(self, error: Exception) -> None:
        self.status = SyncStatus.ERROR
        self.error = str(error) or error.__class__.__name__
        logger.error(f"Board sync failed: {self.error}")
