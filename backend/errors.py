"""Error kinds shared by the upload, download and cleanup flows.

Backend failures (database or object storage) never leave this boundary as
raw exceptions; they are translated into ``ShareError`` with one of the kinds
below and mapped to an HTTP status by the handler registered in ``main``.
"""

import enum
import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from storage.object_storage import StorageError

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    PASSWORD_REQUIRED = "password_required"
    PASSWORD_INCORRECT = "password_incorrect"
    UPSTREAM_FAILURE = "upstream_failure"


STATUS_CODES = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.EXPIRED: 410,
    ErrorKind.PASSWORD_REQUIRED: 401,
    ErrorKind.PASSWORD_INCORRECT: 403,
    ErrorKind.UPSTREAM_FAILURE: 502,
}

DEFAULT_MESSAGES = {
    ErrorKind.NOT_FOUND: "File not found",
    ErrorKind.EXPIRED: "File has expired and been deleted",
    ErrorKind.PASSWORD_REQUIRED: "Password required",
    ErrorKind.PASSWORD_INCORRECT: "Incorrect password",
    ErrorKind.UPSTREAM_FAILURE: "Storage backend unavailable",
}


class ShareError(Exception):
    def __init__(self, kind: ErrorKind, message: str | None = None):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


@contextmanager
def upstream(operation: str):
    """Translate database and storage exceptions raised inside the block."""
    try:
        yield
    except (SQLAlchemyError, StorageError) as e:
        logger.error("%s failed: %s", operation, e)
        raise ShareError(ErrorKind.UPSTREAM_FAILURE, f"{operation} failed: {e}") from e
