"""Photo model: metadata row for one object in the blob store."""

from sqlalchemy import BigInteger, Column, Index, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from ..database import Base


class Photo(Base):
    """Photo metadata.

    ``image_path`` is the only handle on the stored object. ``folder_id`` has
    no ON DELETE action: a folder still holding photos cannot be dropped
    behind the deletion service's back.
    """

    __tablename__ = "photos"
    __table_args__ = (
        Index("ix_photos_user_folder", "user_id", "folder_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    folder_id = Column(Integer, ForeignKey("folders.id"), nullable=True)
    image_path = Column(Text, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())
    size_in_bytes = Column(BigInteger, nullable=False, default=0)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
