import asyncio
import logging

from src.archive.tasks import archive_task_snapshot
from src.tasks.schemas import Task
from src.work_queue.base import WorkQueue

logger = logging.getLogger(__name__)


class CeleryWorkQueue(WorkQueue):
    def __init__(self, *, queue_name: str):
        self.queue_name = queue_name

    async def enqueue(self, snapshot: Task) -> str:
        # Publishing talks to the broker synchronously.
        result = await asyncio.to_thread(
            archive_task_snapshot.apply_async,
            args=[snapshot.to_snapshot_json()],
            queue=self.queue_name,
        )
        logger.info(
            f"Queued snapshot of task '{snapshot.id}' as message '{result.id}'"
        )
        return result.id
