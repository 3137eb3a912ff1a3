"""Backend client — the metadata table and the object storage bucket.

One client is built at startup (``create_client``) and handed to every flow;
HTTP handlers receive it through the ``get_client`` dependency.
"""

from fastapi import Request
from sqlalchemy.orm import Session, sessionmaker

from config import STORAGE_DIR, STORAGE_BUCKET
from storage import LocalObjectStorage, ObjectStorage


class BackendClient:
    def __init__(self, session_factory: sessionmaker, storage: ObjectStorage):
        self._session_factory = session_factory
        self.storage = storage

    def session(self) -> Session:
        return self._session_factory()


def create_client() -> BackendClient:
    from database import SessionLocal

    return BackendClient(
        session_factory=SessionLocal,
        storage=LocalObjectStorage(STORAGE_DIR, bucket=STORAGE_BUCKET),
    )


def get_client(request: Request) -> BackendClient:
    return request.app.state.client
