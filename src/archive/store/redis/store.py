from src.common.redis import RedisClient
from src.archive.store.base import ArchiveStore


class RedisArchiveStore(ArchiveStore):
    def __init__(self, *, redis_client: RedisClient, container_name: str):
        self.client = redis_client
        self.container_name = container_name

    def _get_blob_key(self, key: str) -> str:
        return f"archive:{self.container_name}:{key}"

    async def write_blob(self, key: str, content: str) -> None:
        await self.client.set(self._get_blob_key(key), content)

    async def read_blob(self, key: str) -> str | None:
        return await self.client.get(self._get_blob_key(key))

    async def delete_blob_if_exists(self, key: str) -> bool:
        return await self.client.delete(self._get_blob_key(key)) > 0
