"""Repository for photo rows."""

from typing import Dict, Iterable, List, Set, Tuple

from sqlalchemy import func

from ..exceptions import PhotoNotFoundError
from ..models.photo import Photo
from ..models.tag import Tag, PhotoTagRelation
from ..schemas.photo import PhotoCreate
from .base import OwnedRepository


class PhotoRepository(OwnedRepository[Photo]):
    """Data access for photos. Every query is owner-scoped."""

    model_class = Photo
    not_found_error = PhotoNotFoundError

    def create(self, owner_id: int, data: PhotoCreate) -> Photo:
        photo = Photo(
            user_id=owner_id,
            name=data.name,
            description=data.description,
            folder_id=data.folder_id,
            image_path=data.image_path,
            size_in_bytes=data.size_in_bytes,
            width=data.width,
            height=data.height,
        )
        self.db.add(photo)
        self.db.flush()
        self.db.refresh(photo)
        return photo

    def list_by_owner(self, owner_id: int) -> List[Photo]:
        return self._owned_query(owner_id).order_by(Photo.id).all()

    def list_by_folder(self, owner_id: int, folder_id: int) -> List[Photo]:
        return (
            self._owned_query(owner_id)
            .filter(Photo.folder_id == folder_id)
            .order_by(Photo.id)
            .all()
        )

    def list_in_folders(self, owner_id: int, folder_ids: Iterable[int]) -> List[Photo]:
        ids = list(set(folder_ids))
        if not ids:
            return []
        return self._owned_query(owner_id).filter(Photo.folder_id.in_(ids)).order_by(Photo.id).all()

    def search_by_labels(self, owner_id: int, labels: Set[str]) -> List[Photo]:
        """Photos carrying at least one of *labels*. An empty set matches nothing."""
        if not labels:
            return []
        return (
            self._owned_query(owner_id)
            .join(PhotoTagRelation, PhotoTagRelation.photo_id == Photo.id)
            .join(Tag, Tag.id == PhotoTagRelation.tag_id)
            .filter(Tag.user_id == owner_id, Tag.label.in_(labels))
            .distinct()
            .order_by(Photo.id)
            .all()
        )

    def totals_by_folder(self, owner_id: int) -> Dict[int, Tuple[int, int]]:
        """Map each folder id to ``(photo_count, total_bytes)`` for its direct photos."""
        rows = (
            self.db.query(
                Photo.folder_id,
                func.count(Photo.id),
                func.coalesce(func.sum(Photo.size_in_bytes), 0),
            )
            .filter(Photo.user_id == owner_id, Photo.folder_id.isnot(None))
            .group_by(Photo.folder_id)
            .all()
        )
        return {folder_id: (int(count), int(size)) for folder_id, count, size in rows}

    def move(self, owner_id: int, photo_ids: Iterable[int], folder_id: int) -> int:
        """Bulk re-file photos. Returns the number of rows changed."""
        ids = list(set(photo_ids))
        if not ids:
            return 0
        return (
            self._owned_query(owner_id)
            .filter(Photo.id.in_(ids))
            .update({Photo.folder_id: folder_id}, synchronize_session=False)
        )

    def delete_by_ids(self, owner_id: int, photo_ids: Iterable[int]) -> int:
        ids = list(set(photo_ids))
        if not ids:
            return 0
        return (
            self._owned_query(owner_id)
            .filter(Photo.id.in_(ids))
            .delete(synchronize_session=False)
        )
