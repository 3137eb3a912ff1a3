"""File ORM model."""

from sqlalchemy import BigInteger, Column, DateTime, String, func

from database import Base


class FileModel(Base):
    __tablename__ = "files"

    id = Column(String(36), primary_key=True)
    filename = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_size = Column(BigInteger, nullable=False)
    password_hash = Column(String, nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=func.now())
