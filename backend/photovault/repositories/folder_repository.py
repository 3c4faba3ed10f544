"""Repository for folder rows."""

from typing import Iterable, List, Optional

from ..exceptions import FolderNotFoundError
from ..models.folder import Folder
from .base import OwnedRepository


class FolderRepository(OwnedRepository[Folder]):
    """Data access for the folder forest. Every query is owner-scoped."""

    model_class = Folder
    not_found_error = FolderNotFoundError

    def create(
        self,
        owner_id: int,
        name: str,
        description: Optional[str] = None,
        parent_id: Optional[int] = None,
    ) -> Folder:
        folder = Folder(
            user_id=owner_id,
            name=name,
            description=description,
            parent_id=parent_id,
        )
        self.db.add(folder)
        self.db.flush()
        self.db.refresh(folder)
        return folder

    def get_children(self, owner_id: int, parent_id: int) -> List[Folder]:
        return (
            self._owned_query(owner_id)
            .filter(Folder.parent_id == parent_id)
            .order_by(Folder.name, Folder.id)
            .all()
        )

    def get_forest_index(self, owner_id: int) -> list:
        """All ``(id, parent_id, name)`` rows of the owner's forest in one query."""
        return (
            self.db.query(Folder.id, Folder.parent_id, Folder.name)
            .filter(Folder.user_id == owner_id)
            .all()
        )

    def delete_by_ids(self, owner_id: int, folder_ids: Iterable[int]) -> int:
        ids = list(set(folder_ids))
        if not ids:
            return 0
        return (
            self._owned_query(owner_id)
            .filter(Folder.id.in_(ids))
            .delete(synchronize_session=False)
        )
