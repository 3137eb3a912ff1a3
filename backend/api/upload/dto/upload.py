"""Upload Data Transfer Objects."""

from datetime import datetime

from pydantic import BaseModel


class UploadResponse(BaseModel):
    id: str
    url: str
    filename: str
    file_size: int
    expires_at: datetime
    password_protected: bool
