from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

import auth
from client import get_client
from main import app
from api.files.repositories import files_repository
from api.files.services.files_service import hash_password


def _upload(client, content=b"0123456789", filename="report.pdf", **fields):
    return client.post(
        "/api/upload",
        files={"file": (filename, content, "application/pdf")},
        data=fields,
    )


def _store_expired(backend, file_id="expired-id"):
    path = f"uploads/{file_id}/old.txt"
    backend.storage.put(path, b"old")
    files_repository.insert(
        backend,
        id=file_id,
        filename="old.txt",
        file_path=path,
        file_size=3,
        expires_at=datetime.now(timezone.utc) - timedelta(seconds=1),
    )
    return path


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_upload_returns_share_link(client):
    response = _upload(client, password="abc", expiration_minutes="1")

    assert response.status_code == 201, response.text
    data = response.json()
    assert data["url"] == f"http://testserver/download/{data['id']}"
    assert data["filename"] == "report.pdf"
    assert data["file_size"] == 10
    assert data["password_protected"] is True


def test_upload_rejects_bad_expiration(client):
    response = _upload(client, expiration_minutes="60")
    assert response.status_code == 422


def test_raw_put_upload(client, backend):
    response = client.put(
        "/api/upload/notes.txt",
        content=b"plain text",
        headers={"X-Password": "secret", "X-Expires-Minutes": "2"},
    )

    assert response.status_code == 201, response.text
    record = files_repository.get_by_id(backend, response.json()["id"])
    assert record.filename == "notes.txt"
    assert record.password_hash == hash_password("secret")
    assert backend.storage.get(record.file_path) == b"plain text"


def test_raw_put_upload_too_large(client, monkeypatch):
    from api.upload.services import upload_service

    monkeypatch.setattr(upload_service, "MAX_FILE_SIZE", "4B")

    response = client.put("/api/upload/big.bin", content=b"0123456789")
    assert response.status_code == 413


def test_file_info_hides_internals(client):
    file_id = _upload(client, password="abc", expiration_minutes="5").json()["id"]

    response = client.get(f"/download/{file_id}")

    assert response.status_code == 200
    info = response.json()
    assert info["filename"] == "report.pdf"
    assert info["password_required"] is True
    assert 0 < info["expires_in_seconds"] <= 300
    assert "password_hash" not in info
    assert "file_path" not in info
    assert client.get(f"/api/files/{file_id}").json()["id"] == file_id


def test_download_round_trip_without_password(client):
    file_id = _upload(client, content=b"\x00\x01binary").json()["id"]

    info = client.get(f"/download/{file_id}").json()
    assert info["password_required"] is False

    response = client.post(f"/download/{file_id}")
    assert response.status_code == 200
    assert response.content == b"\x00\x01binary"
    assert 'filename="report.pdf"' in response.headers["content-disposition"]
    assert response.headers["content-type"] == "application/pdf"


@pytest.mark.parametrize(
    "password, status, kind",
    [
        ("", 401, "password_required"),
        ("xyz", 403, "password_incorrect"),
    ],
)
def test_download_password_errors(client, password, status, kind):
    file_id = _upload(client, password="abc").json()["id"]

    response = client.post(f"/download/{file_id}", data={"password": password})

    assert response.status_code == status
    assert response.json()["kind"] == kind


def test_download_with_correct_password(client):
    file_id = _upload(client, password="abc").json()["id"]

    response = client.post(f"/download/{file_id}", data={"password": "abc"})

    assert response.status_code == 200
    assert response.content == b"0123456789"


def test_unknown_link_is_not_found(client):
    response = client.get("/download/00000000-0000-0000-0000-000000000000")

    assert response.status_code == 404
    assert response.json() == {"detail": "File not found", "kind": "not_found"}


def test_expired_link_is_purged(client, backend):
    _store_expired(backend)

    response = client.get("/download/expired-id")
    assert response.status_code == 410
    assert response.json()["kind"] == "expired"

    assert client.get("/download/expired-id").status_code == 404
    assert files_repository.get_by_id(backend, "expired-id") is None


def test_cleanup_endpoint(client, backend):
    _store_expired(backend, "one")
    _store_expired(backend, "two")

    first = client.post("/api/cleanup-expired-files")
    assert first.status_code == 200
    assert first.json() == {"message": "Deleted 2 expired files", "deletedCount": 2}

    second = client.get("/api/cleanup-expired-files")
    assert second.status_code == 200
    assert second.json() == {"message": "No expired files found", "deletedCount": 0}


def test_cleanup_endpoint_requires_service_key_when_configured(client, monkeypatch):
    monkeypatch.setattr(auth, "SERVICE_KEY", "s3cret")
    monkeypatch.setattr(auth, "SERVICE_KEY_ENABLED", True)

    assert client.post("/api/cleanup-expired-files").status_code == 401
    assert client.post(
        "/api/cleanup-expired-files", headers={"Authorization": "Bearer wrong"}
    ).status_code == 401

    by_bearer = client.post(
        "/api/cleanup-expired-files", headers={"Authorization": "Bearer s3cret"}
    )
    by_header = client.post("/api/cleanup-expired-files", headers={"X-Service-Key": "s3cret"})
    assert by_bearer.status_code == 200
    assert by_header.status_code == 200


def test_raw_put_password_header_is_utf8(client):
    response = client.put(
        "/api/upload/notes.txt",
        content=b"plain text",
        headers={"X-Password": "pässword".encode("utf-8")},
    )
    assert response.status_code == 201, response.text
    file_id = response.json()["id"]

    wrong = client.post(f"/download/{file_id}", data={"password": "password"})
    assert wrong.status_code == 403

    right = client.post(f"/download/{file_id}", data={"password": "pässword"})
    assert right.status_code == 200
    assert right.content == b"plain text"


def test_raw_put_rejects_non_utf8_password_header(client):
    response = client.put(
        "/api/upload/notes.txt",
        content=b"plain text",
        headers={"X-Password": b"\xff\xfe"},
    )
    assert response.status_code == 422


def test_upload_storage_failure_is_bad_gateway(unwritable_backend):
    app.dependency_overrides[get_client] = lambda: unwritable_backend
    try:
        response = _upload(TestClient(app))
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 502
    assert response.json()["kind"] == "upstream_failure"
