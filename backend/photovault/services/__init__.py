"""Business logic services."""

from .folder_service import FolderService
from .photo_service import PhotoService
from .tag_service import TagService
from .deletion_service import DeletionService

__all__ = ["FolderService", "PhotoService", "TagService", "DeletionService"]
