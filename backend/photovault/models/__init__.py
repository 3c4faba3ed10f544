"""Database models."""

from .user import User
from .folder import Folder
from .photo import Photo
from .tag import Tag, PhotoTagRelation

__all__ = ["User", "Folder", "Photo", "Tag", "PhotoTagRelation"]
