"""Download service — lookup, lazy expiry, password gate, byte fetch."""

import logging
import secrets
from datetime import datetime, timezone

from client import BackendClient
from errors import ErrorKind, ShareError, upstream
from api.files.dto.file import FileRecord
from api.files.repositories import files_repository
from api.files.services import files_service

logger = logging.getLogger(__name__)


def get_file(client: BackendClient, file_id: str, now: datetime | None = None) -> FileRecord:
    """Return the live record for ``file_id``.

    An expired record is deleted together with its object on discovery and
    reported as expired.
    """
    now = now or datetime.now(timezone.utc)

    with upstream("Looking up file"):
        record = files_repository.get_by_id(client, file_id)
    if record is None:
        raise ShareError(ErrorKind.NOT_FOUND)

    if files_service.is_expired(record, now):
        logger.warning("Access to expired file %s; deleting", file_id)
        files_service.delete_file(client, record)
        raise ShareError(ErrorKind.EXPIRED)

    return record


def verify_password(record: FileRecord, password: str | None) -> None:
    if record.password_hash is None:
        return
    if not password:
        raise ShareError(ErrorKind.PASSWORD_REQUIRED)
    digest = files_service.hash_password(password).encode("utf-8")
    if not secrets.compare_digest(digest, record.password_hash.encode("utf-8")):
        raise ShareError(ErrorKind.PASSWORD_INCORRECT)


def download(
    client: BackendClient,
    file_id: str,
    password: str | None = None,
    now: datetime | None = None,
) -> tuple[bytes, str]:
    """Return ``(data, filename)`` for a live, correctly unlocked file."""
    record = get_file(client, file_id, now)
    verify_password(record, password)

    with upstream("Downloading file"):
        data = client.storage.get(record.file_path)

    logger.info("Downloaded %s (%d bytes)", file_id, len(data))
    return data, record.filename
