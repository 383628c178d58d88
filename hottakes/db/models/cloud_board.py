from sqlalchemy import JSON, Boolean, Column, DateTime, String, func
from hottakes.db.base import Base

class CloudBoardRecord(Base):
    __tablename__ = "cloud_boards"

    id = Column(String, primary_key=True, index=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    cover_image = Column(String, nullable=True)
    template_id = Column(String, nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Sharing policy, flattened so public links can be looked up
    visibility = Column(String, nullable=False, default="private")
    allowed_friends = Column(JSON, nullable=False, default=list)
    public_link_enabled = Column(Boolean, nullable=False, default=False)
    public_link_id = Column(String, nullable=True, unique=True, index=True)

    synced_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
