"""Cleanup controller — HTTP trigger for the expiry sweep."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from auth import is_service
from client import BackendClient, get_client
from cleanup import run_cleanup
from errors import ShareError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Cleanup"])


@router.api_route("/cleanup-expired-files", methods=["GET", "POST"])
async def cleanup_expired_files(request: Request, client: BackendClient = Depends(get_client)):
    """Purge expired files. Takes no input; reports how many were removed."""
    if not is_service(request):
        raise HTTPException(status_code=401, detail="Service key required")

    try:
        result = run_cleanup(client)
    except ShareError as e:
        return JSONResponse({"error": e.message}, status_code=400)
    return JSONResponse(result.model_dump(by_alias=True))
