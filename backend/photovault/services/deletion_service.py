"""Deletion orchestrator: keeps the SQL store and the blob store consistent.

The two stores cannot share a transaction, and a blob delete cannot be
undone. The protocols below choose where that gap is allowed to show:

``delete_folders``
    All requested folders are ownership-checked first. Then, in request
    order, each folder's whole subtree is removed: the stored object of
    every photo in it, the photos' tag relations, the photo rows, and the
    folder rows. A blob failure other than "already missing" rolls the
    transaction back and is reported. Objects deleted before the failure
    stay deleted (at-least-once delete for blobs).

``delete_photos``
    Relation rows and photo rows are deleted and committed first, then the
    stored objects are removed best-effort. Any object that could not be
    removed turns the response into PartialDeletionError listing the keys
    that may now be orphaned.
"""

import logging
from typing import Iterable, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import (
    BlobNotFoundError,
    BlobStoreError,
    ConflictError,
    DatabaseError,
    PartialDeletionError,
    PhotoNotFoundError,
    ValidationError,
)
from ..models.user import User
from ..repositories.folder_repository import FolderRepository
from ..repositories.photo_repository import PhotoRepository
from ..repositories.tag_repository import TagRepository
from ..storage.blob_store import BlobStore, blob_key_from_path, delete_blobs
from .folder_service import descendant_closure, index_forest
from .transaction import commit

logger = logging.getLogger(__name__)


class DeletionService:
    """Cross-store deletes for one owner."""

    def __init__(self, db: Session, blob_store: BlobStore):
        self.db = db
        self.blob_store = blob_store
        self.folder_repo = FolderRepository(db)
        self.photo_repo = PhotoRepository(db)
        self.tag_repo = TagRepository(db)

    def delete_folders(self, owner_id: int, folder_ids: Iterable[int]) -> dict:
        """Cascade-delete folders with their subtrees, photos, relations and objects.

        Returns counts of removed folders and photos. Raises
        FolderNotFoundError when any id is missing or foreign and
        ConflictError when the owner's root folder is among them; nothing is
        touched in either case.
        """
        ids = list(dict.fromkeys(folder_ids))
        if not ids:
            raise ValidationError("No folder ids given", field="ids")

        for folder_id in ids:
            self.folder_repo.get_owned(folder_id, owner_id)

        root_folder_id = self.db.query(User.root_folder_id).filter(User.id == owner_id).scalar()
        if root_folder_id in ids:
            raise ConflictError("The root folder cannot be deleted", details={"folder_id": root_folder_id})

        _, children_by_parent = index_forest(self.folder_repo.get_forest_index(owner_id))
        removed_folders: Set[int] = set()
        removed_photos = 0

        try:
            for folder_id in ids:
                if folder_id in removed_folders:
                    # Already gone as part of an earlier folder's subtree.
                    continue
                subtree = descendant_closure(children_by_parent, [folder_id]) - removed_folders

                photos = self.photo_repo.list_in_folders(owner_id, subtree)
                for photo in photos:
                    self._delete_blob(photo.image_path)

                photo_ids = [photo.id for photo in photos]
                self.tag_repo.delete_relations_for_photos(photo_ids)
                removed_photos += self.photo_repo.delete_by_ids(owner_id, photo_ids)
                self.folder_repo.delete_by_ids(owner_id, subtree)
                removed_folders |= subtree
        except BlobStoreError:
            self.db.rollback()
            logger.error(
                "Folder delete aborted by blob store failure",
                extra={"owner_id": owner_id, "folder_ids": ids},
            )
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(
                "Folder delete failed",
                extra={"owner_id": owner_id, "folder_ids": ids, "error": str(e)},
            )
            raise DatabaseError("Failed to delete folders") from e

        commit(self.db, "delete_folders")
        logger.info(
            "Folders deleted",
            extra={"owner_id": owner_id, "folders": len(removed_folders), "photos": removed_photos},
        )
        return {"folders": len(removed_folders), "photos": removed_photos}

    def delete_photos(self, owner_id: int, photo_ids: Iterable[int]) -> int:
        """Delete the caller's photos, then their stored objects.

        Returns the number of photo rows removed.
        """
        ids = list(dict.fromkeys(photo_ids))
        if not ids:
            raise ValidationError("No photo ids given", field="ids")

        photos = self.photo_repo.list_owned(owner_id, ids)
        owned_ids = [photo.id for photo in photos]
        image_paths = [photo.image_path for photo in photos]

        try:
            self.tag_repo.delete_relations_for_photos(owned_ids)
            deleted = self.photo_repo.delete_by_ids(owner_id, owned_ids)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Photo delete failed", extra={"owner_id": owner_id, "error": str(e)})
            raise DatabaseError("Failed to delete photos") from e

        if deleted == 0:
            self.db.rollback()
            raise PhotoNotFoundError(ids)

        commit(self.db, "delete_photos")

        report = delete_blobs(self.blob_store, image_paths)
        if not report.ok:
            logger.error(
                "Photos deleted but stored objects remain",
                extra={"owner_id": owner_id, "failed_keys": sorted(report.failed)},
            )
            raise PartialDeletionError(deleted, sorted(report.failed))

        logger.info(
            "Photos deleted",
            extra={"owner_id": owner_id, "deleted": deleted, "already_missing": len(report.missing)},
        )
        return deleted

    def _delete_blob(self, image_path: str) -> None:
        """Delete one object; a missing object counts as deleted."""
        try:
            key = blob_key_from_path(image_path)
        except ValueError as e:
            raise BlobStoreError(image_path, str(e)) from e
        try:
            self.blob_store.delete(key)
        except BlobNotFoundError:
            logger.info("Stored object already absent", extra={"key": key})
