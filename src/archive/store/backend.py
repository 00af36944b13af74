from src.config import Settings
from src.common.redis import RedisClient
from src.archive.store.base import ArchiveStore
from src.archive.store.filesystem.store import FilesystemArchiveStore
from src.archive.store.redis.store import RedisArchiveStore


def get_archive_store_backend(
    redis_client: RedisClient,
    settings: Settings,
) -> ArchiveStore:
    if settings.ARCHIVE_BACKEND == "redis":
        return RedisArchiveStore(
            redis_client=redis_client,
            container_name=settings.ARCHIVE_NAMESPACE,
        )
    elif settings.ARCHIVE_BACKEND == "filesystem":
        return FilesystemArchiveStore(
            base_path=settings.ARCHIVE_PATH,
            container_name=settings.ARCHIVE_NAMESPACE,
        )
    else:
        raise ValueError(f"Unsupported archive backend: {settings.ARCHIVE_BACKEND}")
