from fastapi import APIRouter, Depends
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hottakes.db.models.cloud_board import CloudBoardRecord
from hottakes.db.session import get_db
from hottakes.schemas.system import SystemStats

router = APIRouter(prefix="/api/system", tags=["system"])


def _count_where(condition):
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


@router.get("/stats", response_model=SystemStats)
async def get_stats(db: AsyncSession = Depends(get_db)):
    """Counts over boards that are not soft-deleted."""
    query = select(
        func.count(CloudBoardRecord.id).label("boards"),
        func.count(func.distinct(CloudBoardRecord.owner_id)).label("owners"),
        _count_where(CloudBoardRecord.visibility != "private").label("shared"),
        _count_where(CloudBoardRecord.public_link_enabled.is_(True)).label("public_links"),
    ).where(CloudBoardRecord.deleted_at.is_(None))

    result = await db.execute(query)
    return SystemStats(**result.mappings().one())
