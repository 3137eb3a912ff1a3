"""Cleanup — removes expired files and their stored objects.

Run standalone: python cleanup.py
Meant to be called periodically (cron, or the /api/cleanup-expired-files
endpoint). Safe to run repeatedly and concurrently.
"""

import logging
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from client import BackendClient
from errors import upstream
from storage import StorageError
from api.files.repositories import files_repository

logger = logging.getLogger(__name__)


class SweepResult(BaseModel):
    message: str
    deleted_count: int = Field(0, serialization_alias="deletedCount")


def run_cleanup(client: BackendClient, now: datetime | None = None) -> SweepResult:
    """Delete every record that expired before ``now`` and its object.

    Objects go first, then records. A storage failure is logged and the
    records are deleted anyway, so the worst case is an orphaned object,
    never a record pointing at missing bytes. The same cutoff is used for
    the lookup and the delete.

    The reported count is the number of rows this call deleted. If a
    concurrent sweep removed the same rows first, this call still removed
    the objects but reports no expired files.
    """
    now = now or datetime.now(timezone.utc)

    with upstream("Listing expired files"):
        expired = files_repository.list_expired_before(client, now)

    if not expired:
        return SweepResult(message="No expired files found")

    paths = [record.file_path for record in expired]
    try:
        client.storage.remove(paths)
    except StorageError as e:
        logger.error("Storage deletion error: %s", e)

    with upstream("Deleting expired records"):
        count = files_repository.delete_expired_before(client, now)

    logger.info("Cleanup removed %d expired file(s)", count)
    if not count:
        return SweepResult(message="No expired files found")
    return SweepResult(message=f"Deleted {count} expired files", deleted_count=count)


if __name__ == "__main__":
    from client import create_client
    from config import LOG_LEVEL

    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    result = run_cleanup(create_client())
    print(result.model_dump_json(by_alias=True))
