import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hottakes.core.access import (
    can_user_view_board,
    filter_visible_boards,
    revoke_public_link,
    update_board_sharing,
)
from hottakes.db.models.cloud_board import CloudBoardRecord
from hottakes.db.session import get_db
from hottakes.schemas.common import as_utc
from hottakes.schemas.sharing import CloudBoard, SharingPolicy, SharingUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/boards", tags=["boards"])


def record_to_board(record: CloudBoardRecord) -> CloudBoard:
    return CloudBoard(
        id=record.id,
        owner_id=record.owner_id,
        name=record.name,
        cover_image=record.cover_image,
        template_id=record.template_id,
        created_at=as_utc(record.created_at),
        updated_at=as_utc(record.updated_at),
        deleted_at=as_utc(record.deleted_at),
        sharing=SharingPolicy(
            visibility=record.visibility,
            allowed_friends=list(record.allowed_friends or []),
            public_link_enabled=bool(record.public_link_enabled),
            public_link_id=record.public_link_id,
        ),
        synced_at=as_utc(record.synced_at),
    )


def apply_sharing(record: CloudBoardRecord, sharing: SharingPolicy) -> None:
    record.visibility = sharing.visibility.value
    record.allowed_friends = list(sharing.allowed_friends)
    record.public_link_enabled = sharing.public_link_enabled
    record.public_link_id = sharing.public_link_id


async def get_owned_record(board_id: str, owner_id: str, db: AsyncSession) -> CloudBoardRecord:
    record = await db.get(CloudBoardRecord, board_id)
    if not record:
        raise HTTPException(status_code=404, detail="Board not found")
    if record.owner_id != owner_id:
        raise HTTPException(status_code=403, detail="Only the owner can change this board")
    return record


@router.get("/", response_model=List[CloudBoard])
async def list_boards(
    owner_id: str = Query(..., description="Owner whose boards to return"),
    db: AsyncSession = Depends(get_db),
):
    """List every board record owned by a user (the sync fetch)."""
    result = await db.execute(
        select(CloudBoardRecord)
        .where(CloudBoardRecord.owner_id == owner_id)
        .order_by(CloudBoardRecord.created_at)
    )
    return [record_to_board(r) for r in result.scalars().all()]


@router.put("/", response_model=List[CloudBoard])
async def upsert_boards(
    boards: List[CloudBoard],
    db: AsyncSession = Depends(get_db),
):
    """Store a batch of boards in one commit (the sync push).

    Existing records keep their sharing policy.
    """
    records = []
    for board in boards:
        record = await db.get(CloudBoardRecord, board.id)
        if record is None:
            record = CloudBoardRecord(id=board.id, owner_id=board.owner_id)
            apply_sharing(record, board.sharing)
            db.add(record)
        elif record.owner_id != board.owner_id:
            await db.rollback()
            raise HTTPException(status_code=403, detail=f"Board {board.id} belongs to another user")

        record.name = board.name
        record.cover_image = board.cover_image
        record.template_id = board.template_id
        record.created_at = board.created_at
        record.updated_at = board.updated_at
        record.deleted_at = board.deleted_at
        record.synced_at = board.synced_at
        records.append(record)

    await db.commit()
    logger.info(f"Upserted {len(records)} boards")
    return [record_to_board(r) for r in records]


@router.get("/shared", response_model=List[CloudBoard])
async def list_shared_boards(
    owner_id: str,
    viewer_id: str,
    friend_ids: List[str] = Query(default=[]),
    db: AsyncSession = Depends(get_db),
):
    """Boards of ``owner_id`` that ``viewer_id`` is allowed to see."""
    result = await db.execute(
        select(CloudBoardRecord).where(
            (CloudBoardRecord.owner_id == owner_id) & (CloudBoardRecord.deleted_at.is_(None))
        )
    )
    boards = [record_to_board(r) for r in result.scalars().all()]
    return filter_visible_boards(boards, viewer_id, friend_ids)


@router.get("/public/{link_id}", response_model=CloudBoard)
async def get_public_board(
    link_id: str,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(CloudBoardRecord).where(CloudBoardRecord.public_link_id == link_id)
    )
    record = result.scalar_one_or_none()

    if not record or not record.public_link_enabled or record.deleted_at is not None:
        raise HTTPException(status_code=404, detail="Board not found")

    return record_to_board(record)


@router.get("/{board_id}", response_model=CloudBoard)
async def get_board(
    board_id: str,
    viewer_id: str,
    friend_ids: List[str] = Query(default=[]),
    db: AsyncSession = Depends(get_db),
):
    record = await db.get(CloudBoardRecord, board_id)
    if not record:
        raise HTTPException(status_code=404, detail="Board not found")

    board = record_to_board(record)
    if not can_user_view_board(board, viewer_id, friend_ids):
        logger.info(f"Viewer {viewer_id} denied access to board {board_id}")
        raise HTTPException(status_code=403, detail="Board is not shared with you")

    return board


@router.patch("/{board_id}/sharing", response_model=CloudBoard)
async def update_sharing(
    board_id: str,
    changes: SharingUpdate,
    owner_id: str,
    db: AsyncSession = Depends(get_db),
):
    record = await get_owned_record(board_id, owner_id, db)
    board = update_board_sharing(record_to_board(record), **changes.model_dump(exclude_unset=True))
    apply_sharing(record, board.sharing)
    await db.commit()
    return board


@router.post("/{board_id}/sharing/revoke", response_model=CloudBoard)
async def revoke_sharing_link(
    board_id: str,
    owner_id: str,
    db: AsyncSession = Depends(get_db),
):
    record = await get_owned_record(board_id, owner_id, db)
    board = revoke_public_link(record_to_board(record))
    apply_sharing(record, board.sharing)
    await db.commit()
    return board


@router.delete("/{board_id}")
async def delete_board(
    board_id: str,
    owner_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Delete the remote record of a board."""
    record = await get_owned_record(board_id, owner_id, db)
    await db.delete(record)
    await db.commit()

    return {"message": f"Board {board_id} deleted"}
