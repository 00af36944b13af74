from abc import ABC, abstractmethod


def get_archive_blob_key(task_id: str) -> str:
    return f"{task_id}.json"


class ArchiveStore(ABC):
    @abstractmethod
    async def write_blob(self, key: str, content: str) -> None:
        """Write ``content`` under ``key``, replacing any existing blob."""

    @abstractmethod
    async def read_blob(self, key: str) -> str | None:
        pass

    @abstractmethod
    async def delete_blob_if_exists(self, key: str) -> bool:
        """Delete the blob and report whether it existed."""
