"""Folder browsing: one folder with its photos, children and breadcrumbs."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.folder import FolderContents
from ..services.folder_service import FolderService

router = APIRouter(tags=["files"])


@router.get("/files/{folder_id}", response_model=FolderContents)
def get_folder_contents(
    folder_id: int,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Folder, direct photos with tags, child folders with subtree totals, breadcrumbs.

    404 when the folder does not exist or belongs to someone else.
    """
    return FolderService(db).get_folder_contents(auth.user_id, folder_id)
