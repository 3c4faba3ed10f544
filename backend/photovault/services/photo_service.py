"""Photo registration, listing, tag search and bulk moves."""

import logging
from typing import Iterable, List, Set

from sqlalchemy.orm import Session

from ..exceptions import PhotoNotFoundError, ValidationError
from ..models.photo import Photo
from ..repositories.folder_repository import FolderRepository
from ..repositories.photo_repository import PhotoRepository
from ..repositories.tag_repository import TagRepository
from ..schemas.photo import PhotoCreate, PhotoResponse, PhotoUpdate
from ..schemas.tag import TagResponse
from .transaction import commit

logger = logging.getLogger(__name__)


def parse_tag_labels(tags: str) -> Set[str]:
    """Split a comma-joined tag string into trimmed labels. ``""`` yields no labels."""
    return {label.strip() for label in tags.split(",") if label.strip()}


def build_photo_responses(tag_repo: TagRepository, photos: List[Photo]) -> List[PhotoResponse]:
    """Attach tags to *photos* with a single bulk lookup."""
    tags_by_photo = tag_repo.tags_for_photos(photo.id for photo in photos)
    responses = []
    for photo in photos:
        response = PhotoResponse.model_validate(photo)
        response.tags = [TagResponse(id=tag.id, tag=tag.label) for tag in tags_by_photo.get(photo.id, [])]
        responses.append(response)
    return responses


class PhotoService:
    """Photo operations scoped to one owner."""

    def __init__(self, db: Session):
        self.db = db
        self.photo_repo = PhotoRepository(db)
        self.folder_repo = FolderRepository(db)
        self.tag_repo = TagRepository(db)

    def create_photo(self, owner_id: int, data: PhotoCreate) -> Photo:
        if data.folder_id is not None:
            self.folder_repo.get_owned(data.folder_id, owner_id)

        photo = self.photo_repo.create(owner_id, data)
        commit(self.db, "create_photo")
        logger.info(
            "Photo registered",
            extra={"owner_id": owner_id, "photo_id": photo.id, "folder_id": photo.folder_id},
        )
        return photo

    def update_photo(self, owner_id: int, data: PhotoUpdate) -> PhotoResponse:
        photo = self.photo_repo.get_owned(data.id, owner_id)
        if data.name is not None:
            photo.name = data.name
        if data.description is not None:
            photo.description = data.description
        commit(self.db, "update_photo")
        self.db.refresh(photo)
        return build_photo_responses(self.tag_repo, [photo])[0]

    def list_photos(self, owner_id: int) -> List[PhotoResponse]:
        return build_photo_responses(self.tag_repo, self.photo_repo.list_by_owner(owner_id))

    def search_photos(self, owner_id: int, tags: str) -> List[PhotoResponse]:
        """Photos with at least one of the comma-separated labels (OR semantics)."""
        labels = parse_tag_labels(tags)
        photos = self.photo_repo.search_by_labels(owner_id, labels)
        return build_photo_responses(self.tag_repo, photos)

    def move_photos(self, owner_id: int, photo_ids: Iterable[int], folder_id: int) -> int:
        """Re-file the caller's photos into *folder_id* with one bulk update.

        The destination must belong to the caller. Ids the caller does not
        own are skipped; if nothing matched at all, PhotoNotFoundError.
        """
        ids = list(dict.fromkeys(photo_ids))
        if not ids:
            raise ValidationError("No photo ids given", field="ids")

        self.folder_repo.get_owned(folder_id, owner_id)

        moved = self.photo_repo.move(owner_id, ids, folder_id)
        if moved == 0:
            self.db.rollback()
            raise PhotoNotFoundError(ids)

        commit(self.db, "move_photos")
        logger.info(
            "Photos moved",
            extra={"owner_id": owner_id, "folder_id": folder_id, "requested": len(ids), "moved": moved},
        )
        return moved
