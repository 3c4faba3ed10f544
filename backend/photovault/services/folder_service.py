"""Folder tree engine: folder CRUD, breadcrumbs, and subtree totals.

Tree walks never recurse. The owner's forest is loaded once as an index of
``id -> (parent_id, name)`` rows; breadcrumbs follow parent links upward and
subtree closures grow a frontier downward until it stops changing. Depth of
the tree has no effect on stack usage.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from ..exceptions import FolderNotFoundError
from ..models.folder import Folder
from ..repositories.folder_repository import FolderRepository
from ..repositories.photo_repository import PhotoRepository
from ..repositories.tag_repository import TagRepository
from ..schemas.folder import (
    Breadcrumb,
    ChildFolderResponse,
    FolderContents,
    FolderCreate,
    FolderResponse,
    FolderUpdate,
)
from .photo_service import build_photo_responses
from .transaction import commit

logger = logging.getLogger(__name__)

ForestIndex = Dict[int, Tuple[Optional[int], str]]


def index_forest(rows: Iterable) -> Tuple[ForestIndex, Dict[int, List[int]]]:
    """Build ``id -> (parent_id, name)`` and ``parent_id -> [child ids]`` maps."""
    index: ForestIndex = {}
    children_by_parent: Dict[int, List[int]] = {}
    for folder_id, parent_id, name in rows:
        index[folder_id] = (parent_id, name)
        if parent_id is not None:
            children_by_parent.setdefault(parent_id, []).append(folder_id)
    return index, children_by_parent


def descendant_closure(children_by_parent: Dict[int, List[int]], start_ids: Iterable[int]) -> Set[int]:
    """Every folder reachable from *start_ids* by child links, start ids included."""
    closure = set(start_ids)
    frontier = set(closure)
    while frontier:
        grown: Set[int] = set()
        for parent_id in frontier:
            for child_id in children_by_parent.get(parent_id, ()):
                if child_id not in closure:
                    grown.add(child_id)
        closure |= grown
        frontier = grown
    return closure


def breadcrumb_chain(index: ForestIndex, folder_id: int) -> List[Breadcrumb]:
    """Root-first path ending at *folder_id*."""
    chain: List[Breadcrumb] = []
    seen: Set[int] = set()
    current: Optional[int] = folder_id
    while current is not None and current in index:
        if current in seen:
            logger.warning("Cycle in folder parents", extra={"folder_id": folder_id, "at": current})
            break
        seen.add(current)
        parent_id, name = index[current]
        chain.append(Breadcrumb(id=current, name=name))
        current = parent_id
    chain.reverse()
    return chain


class FolderService:
    """Folder operations for one authenticated owner at a time.

    Public methods:
        create_folder       -- new folder, optionally under an owned parent
        update_folder       -- rename / re-describe
        get_folder_contents -- folder, direct photos with tags, children with totals, breadcrumbs
        get_breadcrumbs     -- root-first path to a folder
        descendant_ids      -- subtree closure of one or more folders
    """

    def __init__(self, db: Session):
        self.db = db
        self.folder_repo = FolderRepository(db)
        self.photo_repo = PhotoRepository(db)
        self.tag_repo = TagRepository(db)

    def create_folder(self, owner_id: int, data: FolderCreate) -> Folder:
        if data.parent_id is not None:
            # Raises FolderNotFoundError for a foreign parent as well.
            self.folder_repo.get_owned(data.parent_id, owner_id)

        folder = self.folder_repo.create(owner_id, data.name, data.description, data.parent_id)
        commit(self.db, "create_folder")
        logger.info("Folder created", extra={"owner_id": owner_id, "folder_id": folder.id})
        return folder

    def update_folder(self, owner_id: int, data: FolderUpdate) -> Folder:
        folder = self.folder_repo.get_owned(data.folder_id, owner_id)
        folder.name = data.name
        folder.description = data.description
        commit(self.db, "update_folder")
        self.db.refresh(folder)
        return folder

    def get_folder_contents(self, owner_id: int, folder_id: int) -> FolderContents:
        folder = self.folder_repo.get_owned(folder_id, owner_id)

        index, children_by_parent = index_forest(self.folder_repo.get_forest_index(owner_id))
        totals = self.photo_repo.totals_by_folder(owner_id)

        child_folders = []
        for child in self.folder_repo.get_children(owner_id, folder.id):
            subtree = descendant_closure(children_by_parent, [child.id])
            count = sum(totals.get(fid, (0, 0))[0] for fid in subtree)
            size = sum(totals.get(fid, (0, 0))[1] for fid in subtree)
            child_folders.append(ChildFolderResponse(
                id=child.id,
                name=child.name,
                description=child.description,
                parent_id=child.parent_id,
                total_photo_count=count,
                total_size_in_bytes=size,
            ))

        photos = self.photo_repo.list_by_folder(owner_id, folder.id)

        return FolderContents(
            folder=FolderResponse.model_validate(folder),
            photos=build_photo_responses(self.tag_repo, photos),
            child_folders=child_folders,
            breadcrumbs=breadcrumb_chain(index, folder.id),
        )

    def get_breadcrumbs(self, owner_id: int, folder_id: int) -> List[Breadcrumb]:
        self.folder_repo.get_owned(folder_id, owner_id)
        index, _ = index_forest(self.folder_repo.get_forest_index(owner_id))
        return breadcrumb_chain(index, folder_id)

    def descendant_ids(self, owner_id: int, folder_ids: Iterable[int]) -> Set[int]:
        """Subtree closure of *folder_ids*. Raises FolderNotFoundError for any id the owner lacks."""
        start_ids = list(dict.fromkeys(folder_ids))
        index, children_by_parent = index_forest(self.folder_repo.get_forest_index(owner_id))
        for folder_id in start_ids:
            if folder_id not in index:
                raise FolderNotFoundError(folder_id)
        return descendant_closure(children_by_parent, start_ids)
