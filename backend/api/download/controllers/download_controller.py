"""Download controller — share-link info and file downloads."""

import mimetypes
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Response

from client import BackendClient, get_client
from api.download.services import download_service
from api.files.dto.file import FileInfoResponse
from api.files.services import files_service

router = APIRouter(tags=["Download"])


def _content_disposition(filename: str) -> str:
    ascii_name = filename.encode("ascii", "replace").decode().replace('"', "_")
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/api/files/{file_id}", response_model=FileInfoResponse)
@router.get("/download/{file_id}", response_model=FileInfoResponse)
async def file_info(file_id: str, client: BackendClient = Depends(get_client)):
    """Public details for a share link; expired files are purged here."""
    record = download_service.get_file(client, file_id)
    return files_service.to_info(record)


@router.post("/download/{file_id}")
async def download_file(
    file_id: str,
    password: str = Form(""),
    client: BackendClient = Depends(get_client),
):
    data, filename = download_service.download(client, file_id, password or None)

    content_type, _ = mimetypes.guess_type(filename)
    if not content_type:
        content_type = "application/octet-stream"

    return Response(
        content=data,
        media_type=content_type,
        headers={"Content-Disposition": _content_disposition(filename)},
    )
