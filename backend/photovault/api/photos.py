"""Photo API: register, list, search, edit, move, delete, and bulk tagging."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.common import IdListRequest, MessageResponse
from ..schemas.photo import (
    PhotoCreate,
    PhotoMoveRequest,
    PhotoResponse,
    PhotoSearchResponse,
    PhotoUpdate,
    PhotoUpdatedResponse,
)
from ..schemas.tag import SetPhotoTagsRequest, SetPhotoTagsResponse
from ..services.deletion_service import DeletionService
from ..services.photo_service import PhotoService
from ..services.tag_service import TagService
from ..storage import BlobStore, get_blob_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/photos", tags=["photos"])


@router.get("", response_model=List[PhotoResponse])
def list_photos(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return PhotoService(db).list_photos(auth.user_id)


@router.get("/search", response_model=PhotoSearchResponse)
def search_photos(
    tags: str = Query("", description="Comma-separated labels; a photo matches if it has any of them"),
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return PhotoSearchResponse(data=PhotoService(db).search_photos(auth.user_id, tags))


@router.post("", response_model=MessageResponse)
def create_photo(
    data: PhotoCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    PhotoService(db).create_photo(auth.user_id, data)
    return MessageResponse(message="Photo was uploaded")


@router.put("", response_model=PhotoUpdatedResponse)
def update_photo(
    data: PhotoUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    photo = PhotoService(db).update_photo(auth.user_id, data)
    return PhotoUpdatedResponse(message="Photo was updated.", data=photo)


@router.put("/move", response_model=MessageResponse)
def move_photos(
    request: PhotoMoveRequest,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    moved = PhotoService(db).move_photos(auth.user_id, request.ids, request.folder_id)
    return MessageResponse(message=f"Moved {moved} photo(s).")


@router.delete("", response_model=MessageResponse)
def delete_photos(
    request: IdListRequest,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Delete photos. A 500 PARTIAL_DELETION means rows are gone but objects may be orphaned."""
    deleted = DeletionService(db, blob_store).delete_photos(auth.user_id, request.ids)
    return MessageResponse(message=f"Deleted {deleted} photo(s).")


@router.post("/tags", response_model=SetPhotoTagsResponse)
def set_photo_tags(
    request: SetPhotoTagsRequest,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Replace the tag set of every listed photo with exactly ``tag_ids``."""
    updated = TagService(db).set_tags_for_photos(auth.user_id, request.photo_ids, request.tag_ids)
    return SetPhotoTagsResponse(message="Tags were updated.", updated_photos=updated)
