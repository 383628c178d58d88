from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from hottakes.core.config import LOCAL_DATABASE_URL

LocalBase = declarative_base()


# On-device copy of the user's boards
class BoardRow(LocalBase):
    __tablename__ = "boards"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    cover_image = Column(String, nullable=True)
    template_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)


class CardRow(LocalBase):
    __tablename__ = "cards"

    id = Column(String, primary_key=True)
    board_id = Column(String, ForeignKey("boards.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String, nullable=False)
    nickname = Column(String, nullable=False, default="")
    image_key = Column(String, nullable=True)
    thumbnail_key = Column(String, nullable=True)
    image_crop = Column(JSON, nullable=True)
    notes = Column(Text, nullable=False, default="")
    extra = Column("metadata", JSON, nullable=False, default=dict)  # "metadata" is reserved on declarative classes
    rank = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class SnapshotRow(LocalBase):
    __tablename__ = "snapshots"

    id = Column(String, primary_key=True)
    board_id = Column(String, ForeignKey("boards.id", ondelete="CASCADE"), index=True, nullable=False)
    episode_number = Column(Integer, nullable=False)
    label = Column(String, nullable=False)
    notes = Column(Text, nullable=False, default="")
    rankings = Column(JSON, nullable=False)  # frozen list of ranking entries
    created_at = Column(DateTime(timezone=True), nullable=False)


def create_local_engine(url: str = LOCAL_DATABASE_URL):
    """Create the on-device engine and make sure its tables exist."""
    engine = create_engine(url, future=True)
    LocalBase.metadata.create_all(engine)
    return engine


def create_local_session_factory(url: str = LOCAL_DATABASE_URL):
    return sessionmaker(bind=create_local_engine(url), autoflush=False, expire_on_commit=False)
