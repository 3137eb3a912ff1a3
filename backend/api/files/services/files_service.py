"""Files service — logic shared by the upload, download and cleanup flows."""

import hashlib
import logging
from datetime import datetime, timedelta, timezone

from client import BackendClient
from errors import upstream
from storage import StorageError
from api.files.dto.file import FileInfoResponse, FileRecord
from api.files.repositories import files_repository

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """Unsalted SHA-256 of the UTF-8 password, lowercase hex.

    This is an access gate for shared links, not credential storage.
    """
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def is_expired(record: FileRecord, now: datetime | None = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return now >= record.expires_at


def time_remaining(record: FileRecord, now: datetime | None = None) -> timedelta:
    now = now or datetime.now(timezone.utc)
    return max(record.expires_at - now, timedelta(0))


def format_remaining(remaining: timedelta) -> str:
    total = int(remaining.total_seconds())
    minutes, seconds = divmod(total, 60)
    return f"{minutes}m {seconds}s"


def to_info(record: FileRecord, now: datetime | None = None) -> FileInfoResponse:
    remaining = time_remaining(record, now)
    return FileInfoResponse(
        id=record.id,
        filename=record.filename,
        file_size=record.file_size,
        password_required=record.password_hash is not None,
        expires_at=record.expires_at,
        expires_in_seconds=int(remaining.total_seconds()),
        time_remaining=format_remaining(remaining),
    )


def delete_file(client: BackendClient, record: FileRecord) -> None:
    """Remove the stored object, then the record.

    A failed object removal is logged and the record is still deleted.
    """
    try:
        client.storage.remove([record.file_path])
    except StorageError as e:
        logger.error("Could not remove object for %s: %s", record.id, e)

    with upstream("Deleting file record"):
        files_repository.delete_by_id(client, record.id)
