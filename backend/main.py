"""Drop Share — Main application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from client import create_client
from config import LOG_LEVEL
from errors import ShareError
from api.cleanup.controllers.cleanup_controller import router as cleanup_router
from api.download.controllers.download_controller import router as download_router
from api.upload.controllers.upload_controller import router as upload_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def run_migrations():
    """Run Alembic migrations on startup."""
    try:
        alembic_ini = Path(__file__).parent / "alembic.ini"
        alembic_cfg = Config(str(alembic_ini))
        alembic_cfg.set_main_option(
            "script_location", str(Path(__file__).parent / "db_migrations")
        )
        command.upgrade(alembic_cfg, "head")
    except Exception as e:
        logger.warning("Migration failed, creating tables directly: %s", e)
        from database import init_db

        init_db()


@asynccontextmanager
async def lifespan(app: FastAPI):
    run_migrations()
    app.state.client = create_client()
    yield


app = FastAPI(title="Drop Share", version="0.1.0", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ShareError)
async def share_error_handler(request: Request, exc: ShareError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "kind": exc.kind.value},
    )


@app.get("/api/health")
async def health():
    return {"status": "ok"}


app.include_router(upload_router)
app.include_router(download_router)
app.include_router(cleanup_router)
