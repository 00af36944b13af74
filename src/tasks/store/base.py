from abc import ABC, abstractmethod
from uuid import uuid4

from src.tasks.schemas import Task


def generate_version_token() -> str:
    return uuid4().hex


class TaskStore(ABC):
    """Keyed task records with compare-and-swap writes.

    Every successful write assigns a fresh version token. Writers holding a
    stale token are rejected with ``ConcurrencyConflictException``.
    """

    @abstractmethod
    async def insert_task(self, task: Task) -> Task:
        pass

    @abstractmethod
    async def get_task(self, partition_key: str, task_id: str) -> Task:
        pass

    @abstractmethod
    async def update_task_if_version_matches(
        self, task: Task, expected_version: str
    ) -> Task:
        pass

    @abstractmethod
    async def delete_task(
        self, partition_key: str, task_id: str, expected_version: str | None = None
    ) -> None:
        pass
