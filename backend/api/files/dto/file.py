"""File Data Transfer Objects."""

from datetime import datetime

from pydantic import BaseModel


class FileRecord(BaseModel):
    """Full metadata row. Never returned to clients as-is."""

    id: str
    filename: str
    file_path: str
    file_size: int
    password_hash: str | None = None
    expires_at: datetime
    created_at: datetime | None = None


class FileInfoResponse(BaseModel):
    id: str
    filename: str
    file_size: int
    password_required: bool
    expires_at: datetime
    expires_in_seconds: int
    time_remaining: str
