import logging
from typing import Any
from uuid import uuid4

from src.archive.store.base import ArchiveStore, get_archive_blob_key
from src.common.exceptions import (
    ConcurrencyConflictException,
    ResourceType,
    ValidationException,
)
from src.tasks.schemas import CreateTaskRequest, Task, TaskStatus, UpdateTaskRequest
from src.tasks.store.base import TaskStore
from src.work_queue.base import WorkQueue

logger = logging.getLogger(__name__)


class TaskService:
    """Coordinates task writes across the task store, work queue and archive.

    The task store is the source of truth. Create and update publish a full
    snapshot to the work queue after the store write succeeds; a failed
    publish is logged and never rolls the write back, so a task can exist
    without an archive entry. Delete skips the queue and removes the archive
    blob directly.
    """

    def __init__(
        self,
        *,
        task_store: TaskStore,
        work_queue: WorkQueue,
        archive_store: ArchiveStore,
        partition_key: str,
    ):
        self.task_store = task_store
        self.work_queue = work_queue
        self.archive_store = archive_store
        self.partition_key = partition_key

    def _validate_name(self, name: str | None) -> str:
        if not name:
            raise ValidationException("Task name is required.")
        return name

    async def _publish_snapshot(self, task: Task) -> None:
        try:
            await self.work_queue.enqueue(task)
        except Exception:
            logger.exception(
                f"Failed to queue snapshot of task '{task.id}'. The archive may not reflect this change."
            )

    async def create_task(self, task_input: CreateTaskRequest) -> Task:
        name = self._validate_name(task_input.name)

        task = await self.task_store.insert_task(
            Task(
                partition_key=self.partition_key,
                id=str(uuid4()),
                name=name,
                status=TaskStatus.TODO,
                due_date=task_input.due_date,
            )
        )
        logger.info(f"Task '{task.id}' created")

        await self._publish_snapshot(task)
        return task

    async def get_task(self, partition_key: str, task_id: str) -> Task:
        return await self.task_store.get_task(partition_key, task_id)

    async def update_task(
        self, partition_key: str, task_id: str, task_input: UpdateTaskRequest
    ) -> Task:
        existing_task = await self.task_store.get_task(partition_key, task_id)

        expected_version = task_input.version_token or existing_task.version_token
        if expected_version is None or expected_version != existing_task.version_token:
            raise ConcurrencyConflictException(ResourceType.TASK, task_id)

        fields_set = task_input.model_fields_set
        updates: dict[str, Any] = {}

        if "name" in fields_set:
            updates["name"] = self._validate_name(task_input.name)

        if "status" in fields_set:
            if task_input.status is None:
                raise ValidationException("Task status cannot be null.")
            updates["status"] = task_input.status

        if "due_date" in fields_set:
            updates["due_date"] = task_input.due_date

        updated_task = await self.task_store.update_task_if_version_matches(
            existing_task.model_copy(update=updates), expected_version
        )
        logger.info(f"Task '{task_id}' updated")

        await self._publish_snapshot(updated_task)
        return updated_task

    async def delete_task(
        self, partition_key: str, task_id: str, version_token: str | None = None
    ) -> None:
        await self.task_store.delete_task(
            partition_key, task_id, expected_version=version_token
        )
        logger.info(f"Task '{task_id}' deleted")

        blob_key = get_archive_blob_key(task_id)
        try:
            if await self.archive_store.delete_blob_if_exists(blob_key):
                logger.info(f"Archive blob '{blob_key}' deleted")
        except Exception:
            logger.exception(f"Failed to delete archive blob '{blob_key}'")
