"""Per-row fan-out for bulk mutations.

Each row is committed on its own. A failure is rolled back for that row only
and reported in the result; rows already committed stay committed.
"""
import logging
from typing import Callable, Iterable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_batch(db: Session, rows: Iterable[T], apply: Callable[[T], None]) -> dict:
    items = []
    for row in rows:
        row_id = row.id
        try:
            apply(row)
            db.commit()
            items.append({"id": row_id, "success": True})
        except SQLAlchemyError as exc:
            db.rollback()
            logger.warning("Batch mutation failed for %s id=%s: %s", type(row).__name__, row_id, exc)
            items.append({"id": row_id, "success": False, "error": str(exc)})
    succeeded = sum(1 for item in items if item["success"])
    return {"success": succeeded == len(items), "count": succeeded, "items": items}
