"""
Translate SQLAlchemy failures into StorageError.

Every service write/read goes through `storage_guard` so routers only ever
see the application exception hierarchy.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from marketsim.core.errors import StorageError

logger = logging.getLogger(__name__)


@contextmanager
def storage_guard(db: Session, operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Storage failure during %s", operation)
        raise StorageError(message=str(exc), operation=operation) from exc
