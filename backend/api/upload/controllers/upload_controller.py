"""Upload controller — multipart form uploads and raw PUT uploads."""

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile, status

from client import BackendClient, get_client
from api.upload.services import upload_service
from api.upload.dto.upload import UploadResponse

router = APIRouter(prefix="/api/upload", tags=["Upload"])


@router.post("", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_form(
    request: Request,
    file: UploadFile = File(...),
    password: str = Form(""),
    expiration_minutes: str = Form(""),
    client: BackendClient = Depends(get_client),
):
    """Upload a file from a form, with optional password and lifetime."""
    try:
        minutes = upload_service.parse_expiry_minutes(expiration_minutes)
        data = await file.read()
        return upload_service.save_upload(
            client,
            filename=file.filename,
            data=data,
            origin=upload_service.resolve_origin(request),
            password=password or None,
            expiration_minutes=minutes,
        )
    except upload_service.FileTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.put("/{filename:path}", response_model=UploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_raw(
    request: Request,
    filename: str,
    client: BackendClient = Depends(get_client),
):
    """Upload a file via streaming PUT request (e.g. ``curl -T``)."""
    expires = request.headers.get("X-Expires-Minutes")

    try:
        password = upload_service.header_text(request.headers.get("X-Password", ""))
        minutes = upload_service.parse_expiry_minutes(expires)
        data = await upload_service.read_body(request)
        return upload_service.save_upload(
            client,
            filename=filename,
            data=data,
            origin=upload_service.resolve_origin(request),
            password=password or None,
            expiration_minutes=minutes,
        )
    except upload_service.FileTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
