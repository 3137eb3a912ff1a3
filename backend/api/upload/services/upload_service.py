"""Upload service — handles file upload logic."""

import logging
import re
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import PurePosixPath

from fastapi import Request

from client import BackendClient
from config import DEFAULT_EXPIRY_MINUTES, MAX_EXPIRY_MINUTES, MAX_FILE_SIZE, PUBLIC_ORIGIN
from errors import ShareError, upstream
from api.files.repositories import files_repository
from api.files.services.files_service import hash_password
from api.upload.dto.upload import UploadResponse

logger = logging.getLogger(__name__)

UPLOAD_PREFIX = "uploads"


class FileTooLargeError(ValueError):
    pass


def generate_id() -> str:
    return str(uuid.uuid4())


def parse_expiry_minutes(value: str | int | None) -> int:
    """Validate the requested lifetime; empty means the configured default."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_EXPIRY_MINUTES

    try:
        minutes = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid expiration: {value!r}")

    if minutes < 1 or minutes > MAX_EXPIRY_MINUTES:
        raise ValueError(f"Expiration must be between 1 and {MAX_EXPIRY_MINUTES} minutes")
    return minutes


def parse_size(size_str: str) -> int:
    """Parse size string like '100MB', '1GB' into bytes."""
    if not size_str:
        return 0

    match = re.match(r"^(\d+(?:\.\d+)?)\s*(B|KB|MB|GB|TB)?$", size_str.strip().upper())
    if not match:
        return 0

    value = float(match.group(1))
    unit = match.group(2) or "B"

    multipliers = {
        "B": 1,
        "KB": 1024,
        "MB": 1024**2,
        "GB": 1024**3,
        "TB": 1024**4,
    }

    return int(value * multipliers[unit])


def clean_filename(filename: str | None) -> str:
    name = PurePosixPath((filename or "").replace("\\", "/")).name.strip()
    if not name or name in (".", ".."):
        raise ValueError("A filename is required")
    return name


def build_file_path(file_id: str, filename: str) -> str:
    return f"{UPLOAD_PREFIX}/{file_id}/{filename}"


def build_share_url(origin: str, file_id: str) -> str:
    return f"{origin.rstrip('/')}/download/{file_id}"


def resolve_origin(request: Request) -> str:
    return PUBLIC_ORIGIN or str(request.base_url).rstrip("/")


def header_text(value: str) -> str:
    """Recover UTF-8 text from a header value, which Starlette decodes as latin-1."""
    try:
        return value.encode("latin-1").decode("utf-8")
    except UnicodeError:
        raise ValueError("Header value must be UTF-8 encoded")


def check_size(size: int) -> None:
    limit = parse_size(MAX_FILE_SIZE)
    if limit and size > limit:
        raise FileTooLargeError(f"File exceeds max size of {MAX_FILE_SIZE}")


async def read_body(request: Request) -> bytes:
    """Collect a streamed request body, enforcing the size limit as it arrives."""
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        check_size(len(body))
    return bytes(body)


def save_upload(
    client: BackendClient,
    filename: str,
    data: bytes,
    origin: str,
    password: str | None = None,
    expiration_minutes: int = DEFAULT_EXPIRY_MINUTES,
    now: datetime | None = None,
) -> UploadResponse:
    """Store the bytes, then write the metadata record, then build the link.

    The object is written first so a record never points at missing bytes.
    If the record write fails the object is left behind; no rollback is done.
    """
    filename = clean_filename(filename)
    check_size(len(data))

    file_id = generate_id()
    file_path = build_file_path(file_id, filename)
    now = now or datetime.now(timezone.utc)
    expires_at = now + timedelta(minutes=expiration_minutes)
    password_hash = hash_password(password) if password else None

    with upstream("Uploading file"):
        client.storage.put(file_path, data)

    try:
        with upstream("Saving file record"):
            record = files_repository.insert(
                client,
                id=file_id,
                filename=filename,
                file_path=file_path,
                file_size=len(data),
                password_hash=password_hash,
                expires_at=expires_at,
            )
    except ShareError:
        logger.warning("Record write failed; object %s is orphaned", file_path)
        raise

    logger.info(
        "Uploaded %s as %s (%d bytes, expires %s, password=%s)",
        filename, file_id, record.file_size, expires_at.isoformat(), bool(password_hash),
    )

    return UploadResponse(
        id=record.id,
        url=build_share_url(origin, record.id),
        filename=record.filename,
        file_size=record.file_size,
        expires_at=record.expires_at,
        password_protected=password_hash is not None,
    )
