"""API routes."""

from .auth_routes import router as auth_router
from .files import router as files_router
from .folders import router as folders_router
from .photos import router as photos_router
from .tags import router as tags_router
from .uploads import router as uploads_router

__all__ = [
    "auth_router",
    "files_router",
    "folders_router",
    "photos_router",
    "tags_router",
    "uploads_router",
]
