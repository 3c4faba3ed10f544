"""Tag creation and photo-tag association management."""

import logging
from typing import Iterable, List

from sqlalchemy.orm import Session

from ..exceptions import DatabaseError, ValidationError
from ..repositories.photo_repository import PhotoRepository
from ..repositories.tag_repository import TagRepository
from ..schemas.tag import MAX_LABEL_LENGTH, OwnedTagResponse, PhotoTags, TagResponse
from .transaction import commit

logger = logging.getLogger(__name__)


class TagService:
    """Tag operations scoped to one owner.

    Public methods:
        add_or_reuse_tag    -- insert-or-fetch a label, returns its id
        tag_photo           -- add_or_reuse_tag plus a relation to one photo
        list_tags           -- the owner's labels
        set_tags_for_photos -- replace the full tag set of several photos at once
    """

    def __init__(self, db: Session):
        self.db = db
        self.tag_repo = TagRepository(db)
        self.photo_repo = PhotoRepository(db)

    def add_or_reuse_tag(self, owner_id: int, label: str) -> int:
        tag_id = self._resolve_tag_id(owner_id, label)
        commit(self.db, "add_or_reuse_tag")
        return tag_id

    def tag_photo(self, owner_id: int, photo_id: int, label: str) -> TagResponse:
        self.photo_repo.get_owned(photo_id, owner_id)
        tag_id = self._resolve_tag_id(owner_id, label)
        self.tag_repo.add_relations(photo_id, [tag_id])
        commit(self.db, "tag_photo")
        return TagResponse(id=tag_id, tag=label.strip())

    def list_tags(self, owner_id: int) -> List[OwnedTagResponse]:
        return [
            OwnedTagResponse(id=tag.id, user_id=tag.user_id, tag=tag.label)
            for tag in self.tag_repo.list_by_owner(owner_id)
        ]

    def set_tags_for_photos(
        self, owner_id: int, photo_ids: Iterable[int], tag_ids: Iterable[int]
    ) -> List[PhotoTags]:
        """Make each photo's tag set exactly *tag_ids*, in one transaction.

        Ownership of every tag and every photo is checked before anything is
        written; one foreign id aborts the whole request with ForbiddenError.
        """
        photo_ids = list(dict.fromkeys(photo_ids))
        tag_ids = list(dict.fromkeys(tag_ids))
        if not photo_ids:
            raise ValidationError("No photo ids given", field="photo_ids")

        self.tag_repo.ensure_all_owned(tag_ids, owner_id)
        self.photo_repo.ensure_all_owned(photo_ids, owner_id)

        for photo_id in photo_ids:
            self.tag_repo.delete_relations_for_photos([photo_id])
            self.tag_repo.add_relations(photo_id, tag_ids)

        commit(self.db, "set_tags_for_photos")

        tags_by_photo = self.tag_repo.tags_for_photos(photo_ids)
        logger.info(
            "Photo tags replaced",
            extra={"owner_id": owner_id, "photos": len(photo_ids), "tags": len(tag_ids)},
        )
        return [
            PhotoTags(
                id=photo_id,
                tags=[TagResponse(id=tag.id, tag=tag.label) for tag in tags_by_photo.get(photo_id, [])],
            )
            for photo_id in photo_ids
        ]

    def _resolve_tag_id(self, owner_id: int, label: str) -> int:
        """Insert ``(owner, label)`` unless present, then read its id back."""
        label = label.strip()
        if not label:
            raise ValidationError("Tag cannot be empty", field="tag")
        if len(label) > MAX_LABEL_LENGTH:
            raise ValidationError(f"Tag cannot exceed {MAX_LABEL_LENGTH} characters", field="tag")

        self.tag_repo.insert_or_ignore(owner_id, label)
        tag = self.tag_repo.get_by_label(owner_id, label)
        if tag is None:
            logger.error("Tag missing after insert", extra={"owner_id": owner_id, "label": label})
            raise DatabaseError("Failed to fetch existing tag")
        return tag.id
