from storage.object_storage import (
    LocalObjectStorage,
    ObjectNotFoundError,
    ObjectStorage,
    StorageError,
)

__all__ = [
    "LocalObjectStorage",
    "ObjectNotFoundError",
    "ObjectStorage",
    "StorageError",
]
