"""Files repository — data access layer for the ``files`` table."""

from datetime import datetime, timezone

from client import BackendClient
from api.files.orm.file_model import FileModel
from api.files.dto.file import FileRecord


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything is stored as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _model_to_dto(model: FileModel) -> FileRecord:
    return FileRecord(
        id=model.id,
        filename=model.filename,
        file_path=model.file_path,
        file_size=model.file_size or 0,
        password_hash=model.password_hash,
        expires_at=as_utc(model.expires_at),
        created_at=as_utc(model.created_at),
    )


def insert(
    client: BackendClient,
    id: str,
    filename: str,
    file_path: str,
    file_size: int,
    expires_at: datetime,
    password_hash: str | None = None,
) -> FileRecord:
    with client.session() as session:
        model = FileModel(
            id=id,
            filename=filename,
            file_path=file_path,
            file_size=file_size,
            password_hash=password_hash,
            expires_at=expires_at,
        )
        session.add(model)
        session.commit()
        session.refresh(model)
        return _model_to_dto(model)


def get_by_id(client: BackendClient, id: str) -> FileRecord | None:
    with client.session() as session:
        model = session.get(FileModel, id)
        return _model_to_dto(model) if model else None


def list_expired_before(client: BackendClient, cutoff: datetime) -> list[FileRecord]:
    with client.session() as session:
        models = session.query(FileModel).filter(FileModel.expires_at < cutoff).all()
        return [_model_to_dto(m) for m in models]


def delete_by_id(client: BackendClient, id: str) -> bool:
    with client.session() as session:
        deleted = session.query(FileModel).filter(FileModel.id == id).delete()
        session.commit()
        return deleted > 0


def delete_expired_before(client: BackendClient, cutoff: datetime) -> int:
    """Delete every record that expired before ``cutoff``; returns the row count."""
    with client.session() as session:
        deleted = (
            session.query(FileModel)
            .filter(FileModel.expires_at < cutoff)
            .delete(synchronize_session=False)
        )
        session.commit()
        return deleted
