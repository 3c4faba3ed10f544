"""Repository for tags and photo-tag association rows."""

from typing import Dict, Iterable, List, Optional

from ..models.tag import Tag, PhotoTagRelation
from .base import OwnedRepository, insert_ignore


class TagRepository(OwnedRepository[Tag]):
    """Data access for tags and the ``photo_tag_relations`` join table."""

    model_class = Tag

    # --- Tags ---

    def insert_or_ignore(self, owner_id: int, label: str) -> None:
        insert_ignore(
            self.db, Tag, [{"user_id": owner_id, "label": label}], ["user_id", "label"]
        )

    def get_by_label(self, owner_id: int, label: str) -> Optional[Tag]:
        return self._owned_query(owner_id).filter(Tag.label == label).first()

    def list_by_owner(self, owner_id: int) -> List[Tag]:
        return self._owned_query(owner_id).order_by(Tag.label).all()

    # --- Relations ---

    def tags_for_photos(self, photo_ids: Iterable[int]) -> Dict[int, List[Tag]]:
        """Fetch the tags of all *photo_ids* in one query, grouped by photo id."""
        ids = list(set(photo_ids))
        grouped: Dict[int, List[Tag]] = {photo_id: [] for photo_id in ids}
        if not ids:
            return grouped

        rows = (
            self.db.query(PhotoTagRelation.photo_id, Tag)
            .join(Tag, Tag.id == PhotoTagRelation.tag_id)
            .filter(PhotoTagRelation.photo_id.in_(ids))
            .order_by(Tag.label, Tag.id)
            .all()
        )
        for photo_id, tag in rows:
            grouped[photo_id].append(tag)
        return grouped

    def add_relations(self, photo_id: int, tag_ids: Iterable[int]) -> None:
        rows = [{"photo_id": photo_id, "tag_id": tag_id} for tag_id in dict.fromkeys(tag_ids)]
        insert_ignore(self.db, PhotoTagRelation, rows, ["photo_id", "tag_id"])

    def delete_relations_for_photos(self, photo_ids: Iterable[int]) -> int:
        ids = list(set(photo_ids))
        if not ids:
            return 0
        return (
            self.db.query(PhotoTagRelation)
            .filter(PhotoTagRelation.photo_id.in_(ids))
            .delete(synchronize_session=False)
        )
