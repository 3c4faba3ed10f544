"""Tag and photo-tag association models."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from ..database import Base


class Tag(Base):
    """A label owned by one user. ``(user_id, label)`` is unique."""

    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("user_id", "label", name="uq_tags_user_label"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    label = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PhotoTagRelation(Base):
    """Pure association row binding a photo to a tag."""

    __tablename__ = "photo_tag_relations"

    photo_id = Column(Integer, ForeignKey("photos.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True, index=True)
