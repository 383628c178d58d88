from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession

from hottakes.core.config import DATABASE_URL, DB_POOL_SIZE


def engine_options(url: str) -> dict:
    # Pool sizing applies to server databases only
    if url.startswith("sqlite"):
        return {}
    return {"pool_pre_ping": True, "pool_size": DB_POOL_SIZE}


engine = create_async_engine(DATABASE_URL, echo=False, future=True, **engine_options(DATABASE_URL))

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db():
    async with async_session() as session:
        yield session
