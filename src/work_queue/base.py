from abc import ABC, abstractmethod

from src.tasks.schemas import Task


class WorkQueue(ABC):
    """Durable, at-least-once channel for task snapshots.

    Consumers must expect duplicate deliveries and deliveries out of enqueue
    order for the same task id.
    """

    @abstractmethod
    async def enqueue(self, snapshot: Task) -> str:
        """Publish a full snapshot and return the message id."""
