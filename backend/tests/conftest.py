import os
import tempfile

os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="drop-share-"))
os.environ["SERVICE_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import sessionmaker

import orm  # noqa: F401
from client import BackendClient, get_client
from database import Base
from main import app
from storage import LocalObjectStorage, StorageError

DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class BrokenRemoveStorage(LocalObjectStorage):
    def remove(self, keys):
        raise StorageError("bucket unavailable")


class BrokenPutStorage(LocalObjectStorage):
    def put(self, key, data):
        raise StorageError("bucket unavailable")


@pytest.fixture(autouse=True)
def setup_and_teardown():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def backend(tmp_path):
    return BackendClient(
        session_factory=TestingSessionLocal,
        storage=LocalObjectStorage(tmp_path, bucket="files"),
    )


@pytest.fixture
def broken_backend(tmp_path):
    return BackendClient(
        session_factory=TestingSessionLocal,
        storage=BrokenRemoveStorage(tmp_path, bucket="files"),
    )


@pytest.fixture
def unwritable_backend(tmp_path):
    return BackendClient(
        session_factory=TestingSessionLocal,
        storage=BrokenPutStorage(tmp_path, bucket="files"),
    )


@pytest.fixture
def client(backend):
    app.dependency_overrides[get_client] = lambda: backend
    yield TestClient(app)
    app.dependency_overrides.clear()
