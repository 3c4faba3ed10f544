"""Folder model: a node in one user's folder forest."""

from sqlalchemy import Column, Index, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy.sql import func
from ..database import Base


class Folder(Base):
    """A folder owned by exactly one user.

    ``parent_id`` is NULL for roots. Parents are always owned by the same
    user, so following ``parent_id`` never leaves the owner's forest.
    """

    __tablename__ = "folders"
    __table_args__ = (
        Index("ix_folders_user_parent", "user_id", "parent_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    parent_id = Column(Integer, ForeignKey("folders.id", ondelete="CASCADE"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
