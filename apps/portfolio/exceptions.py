"""
Portfolio error taxonomy.

Every failure the content core raises is a PortfolioError, so callers can tell
"not found" from "bad input" from "storage broken" without parsing messages.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class PortfolioError(Exception):
    """Base class. Carries the HTTP status and the category used in error payloads."""

    status_code = 500
    category = "server_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(PortfolioError):
    """A section (or other resource) id does not exist."""

    status_code = 404
    category = "not_found"


class ValidationError(PortfolioError):
    """Missing or malformed fields on create/update/reorder."""

    status_code = 400
    category = "validation"


class CorruptData(PortfolioError):
    """A stored content/settings blob could not be parsed."""

    status_code = 500
    category = "corrupt_data"

    def __init__(self, message: str, section_id=None, field=None):
        super().__init__(message)
        self.section_id = section_id
        self.field = field


class InvalidFormat(PortfolioError):
    """An import snapshot is missing required keys or has the wrong shape."""

    status_code = 400
    category = "invalid_format"


class StorageError(PortfolioError):
    """The database was unreachable or a write failed."""

    status_code = 503
    category = "database"


@contextmanager
def storage_errors(db: Session, context: str):
    """Translate SQLAlchemy failures inside the block into StorageError."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s failed", context)
        raise StorageError(f"{context} failed: the database is unavailable.") from exc
