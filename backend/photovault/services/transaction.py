"""Commit helper shared by the services.

Each public service operation runs in the request's session transaction and
finishes with exactly one ``commit``. A failing commit is rolled back and
surfaced as TransactionError; the driver message stays in the logs.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import TransactionError

logger = logging.getLogger(__name__)


def commit(db: Session, operation: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        logger.error("Commit failed", extra={"operation": operation, "error": str(e)})
        db.rollback()
        raise TransactionError(operation) from e
