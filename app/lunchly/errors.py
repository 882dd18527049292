"""
Store failure taxonomy.

The data layer raises these; it never knows about HTTP. The Flask app maps
`ErrorKind` to a status code at the boundary (see `create_app`).
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class ErrorKind(enum.Enum):
    NOT_FOUND = "not_found"
    CONSTRAINT_VIOLATION = "constraint_violation"
    CONNECTION_FAILURE = "connection_failure"


class StoreError(Exception):
    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(StoreError):
    kind = ErrorKind.NOT_FOUND


class ConstraintViolationError(StoreError):
    kind = ErrorKind.CONSTRAINT_VIOLATION


class ConnectionFailureError(StoreError):
    kind = ErrorKind.CONNECTION_FAILURE


@contextmanager
def translate_store_errors(s: Session, action: str) -> Generator[None, None, None]:
    """
    Re-raise SQLAlchemy failures from one store statement as StoreError.
    A rejected write leaves the session rolled back.
    """
    try:
        yield
    except IntegrityError as e:
        s.rollback()
        logger.warning("Constraint violation during %s: %s", action, e.orig)
        raise ConstraintViolationError(f"{action} rejected by the database: {e.orig}") from e
    except (OperationalError, InterfaceError) as e:
        s.rollback()
        logger.error("Database unavailable during %s: %s", action, e.orig)
        raise ConnectionFailureError(f"{action} failed: {e.orig}") from e
