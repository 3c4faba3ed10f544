"""Tag API."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, require_auth
from ..database import get_db
from ..schemas.tag import OwnedTagResponse, TagCreate, TagResponse
from ..services.tag_service import TagService

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("", response_model=List[OwnedTagResponse])
def list_tags(
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    return TagService(db).list_tags(auth.user_id)


@router.post("", response_model=TagResponse)
def add_tag(
    data: TagCreate,
    db: Session = Depends(get_db),
    auth: AuthContext = Depends(require_auth),
):
    """Attach a label to a photo, reusing the caller's existing tag of that name."""
    return TagService(db).tag_photo(auth.user_id, data.photo_id, data.tag)
