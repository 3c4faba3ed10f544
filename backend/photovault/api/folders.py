"""Folder API: create, rename, cascade delete."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.common import IdListRequest, MessageResponse
from ..schemas.folder import (
    FolderCreate,
    FolderCreatedResponse,
    FolderSummary,
    FolderUpdate,
    FolderUpdatedResponse,
)
from ..services.deletion_service import DeletionService
from ..services.folder_service import FolderService
from ..storage import BlobStore, get_blob_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/folders", tags=["folders"])


@router.post("", response_model=FolderCreatedResponse)
def create_folder(
    data: FolderCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    folder = FolderService(db).create_folder(auth.user_id, data)
    return FolderCreatedResponse(message="Folder was created.", id=folder.id)


@router.put("", response_model=FolderUpdatedResponse)
def update_folder(
    data: FolderUpdate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    folder = FolderService(db).update_folder(auth.user_id, data)
    return FolderUpdatedResponse(
        message=f"{folder.name} was updated.",
        data=FolderSummary(id=folder.id, name=folder.name, description=folder.description),
    )


@router.delete("", response_model=MessageResponse)
def delete_folders(
    request: IdListRequest,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Delete folders together with their subfolders, photos and stored objects."""
    result = DeletionService(db, blob_store).delete_folders(auth.user_id, request.ids)
    return MessageResponse(
        message=f"Deleted {result['folders']} folder(s) and {result['photos']} photo(s)."
    )
