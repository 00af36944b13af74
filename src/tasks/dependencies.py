from fastapi import Depends

from src.archive.store.base import ArchiveStore
from src.archive.store.dependencies import get_archive_store
from src.config import Settings, get_settings
from src.tasks.service import TaskService
from src.tasks.store.base import TaskStore
from src.tasks.store.dependencies import get_task_store
from src.work_queue.base import WorkQueue
from src.work_queue.dependencies import get_work_queue


def get_task_service(
    task_store: TaskStore = Depends(get_task_store),
    work_queue: WorkQueue = Depends(get_work_queue),
    archive_store: ArchiveStore = Depends(get_archive_store),
    settings: Settings = Depends(get_settings),
) -> TaskService:
    return TaskService(
        task_store=task_store,
        work_queue=work_queue,
        archive_store=archive_store,
        partition_key=settings.TASK_PARTITION_KEY,
    )
