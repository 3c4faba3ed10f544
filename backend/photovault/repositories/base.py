"""Base repository for owner-scoped models.

Every model in this service carries a ``user_id`` column. All lookups go
through ``_owned_query(owner_id)`` so a row belonging to somebody else is
indistinguishable from a row that does not exist.

Subclasses set ``model_class``, plus ``not_found_error`` when they serve
single-row lookups through ``get_owned``. Tags never do: a foreign tag id is
reported as Forbidden by ``ensure_all_owned``.
"""

from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, Set, Type, TypeVar

from sqlalchemy.orm import Query, Session

from ..database import Base
from ..exceptions import ForbiddenError, PhotoVaultException

ModelT = TypeVar("ModelT", bound=Base)


def insert_ignore(
    db: Session,
    model: Type[Base],
    rows: Sequence[Dict[str, Any]],
    conflict_columns: List[str],
) -> None:
    """INSERT ... ON CONFLICT DO NOTHING for the session's dialect.

    Relies on the unique constraint over *conflict_columns*; concurrent
    identical inserts resolve inside the database, not in application code.
    """
    if not rows:
        return

    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise NotImplementedError(f"insert_ignore is not supported on {dialect}")

    stmt = insert(model).values(list(rows)).on_conflict_do_nothing(index_elements=conflict_columns)
    db.execute(stmt)


class OwnedRepository(Generic[ModelT]):
    """Shared lookups for models with an owning ``user_id``."""

    model_class: Type[ModelT]
    not_found_error: Optional[Type[PhotoVaultException]] = None

    def __init__(self, db: Session):
        self.db = db

    def _owned_query(self, owner_id: int) -> Query:
        return self.db.query(self.model_class).filter(self.model_class.user_id == owner_id)

    def get_owned(self, entity_id: int, owner_id: int) -> ModelT:
        """Get an entity owned by *owner_id*. Raises not_found_error otherwise."""
        entity = self.get_owned_optional(entity_id, owner_id)
        if entity is None:
            if self.not_found_error is None:
                raise NotImplementedError(f"{type(self).__name__} has no single-row lookup")
            raise self.not_found_error(entity_id)
        return entity

    def get_owned_optional(self, entity_id: int, owner_id: int) -> Optional[ModelT]:
        return self._owned_query(owner_id).filter(self.model_class.id == entity_id).first()

    def list_owned(self, owner_id: int, ids: Iterable[int]) -> List[ModelT]:
        ids = list(set(ids))
        if not ids:
            return []
        return self._owned_query(owner_id).filter(self.model_class.id.in_(ids)).all()

    def foreign_ids(self, ids: Iterable[int], owner_id: int) -> Set[int]:
        """Return the subset of *ids* that the owner does not own (or that do not exist)."""
        wanted = set(ids)
        if not wanted:
            return set()
        owned = {
            row.id
            for row in self.db.query(self.model_class.id)
            .filter(self.model_class.user_id == owner_id, self.model_class.id.in_(wanted))
            .all()
        }
        return wanted - owned

    def ensure_all_owned(self, ids: Iterable[int], owner_id: int) -> None:
        """Raise ForbiddenError unless every id in *ids* belongs to *owner_id*."""
        foreign = self.foreign_ids(ids, owner_id)
        if foreign:
            raise ForbiddenError(
                f"Not entitled to {self.model_class.__tablename__}",
                resource_ids=sorted(foreign),
            )
