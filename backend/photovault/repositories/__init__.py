"""Data access repositories."""

from .base import OwnedRepository, insert_ignore
from .folder_repository import FolderRepository
from .photo_repository import PhotoRepository
from .tag_repository import TagRepository

__all__ = [
    "OwnedRepository",
    "insert_ignore",
    "FolderRepository",
    "PhotoRepository",
    "TagRepository",
]
