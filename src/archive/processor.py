import logging
from pydantic import ValidationError

from src.archive.store.base import ArchiveStore, get_archive_blob_key
from src.tasks.schemas import Task

logger = logging.getLogger(__name__)


class ArchiveProcessor:
    """Writes task snapshots delivered by the work queue into the archive.

    Deliveries may be duplicated or arrive out of order. Each valid snapshot
    overwrites the blob for its task, so the archive holds whichever snapshot
    was processed last, which is not necessarily the newest one.
    """

    def __init__(self, archive_store: ArchiveStore):
        self.archive_store = archive_store

    def parse_message(self, message: str | None) -> Task | None:
        if message is None or not message.strip():
            logger.warning("Received null or empty queue message.")
            return None

        try:
            return Task.model_validate_json(message)
        except ValidationError as e:
            logger.error(f"Failed to parse queue message as a task snapshot: {e}")
            return None

    async def process_message(self, message: str | None) -> Task | None:
        snapshot = self.parse_message(message)
        if snapshot is None:
            return None

        logger.info(
            f"Processing task: {snapshot.name}, Status: {snapshot.status.value}, DueDate: {snapshot.due_date}"
        )

        await self.archive_store.write_blob(
            get_archive_blob_key(snapshot.id), snapshot.to_snapshot_json()
        )

        logger.info(
            f"Uploaded task: {snapshot.name}, Status: {snapshot.status.value}, DueDate: {snapshot.due_date}"
        )
        return snapshot
