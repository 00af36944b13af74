import asyncio
import os
from pathlib import Path
from uuid import uuid4

from src.archive.store.base import ArchiveStore


class FilesystemArchiveStore(ArchiveStore):
    """One file per blob inside ``<base_path>/<container_name>``.

    Writes go to a temporary file that is renamed over the target, so readers
    never observe a partially written blob.
    """

    def __init__(self, *, base_path: str, container_name: str):
        self.container_path = Path(base_path) / container_name
        self.container_path.mkdir(parents=True, exist_ok=True)

    def _get_blob_path(self, key: str) -> Path:
        if not key or Path(key).name != key or key in (".", ".."):
            raise ValueError(f"Invalid blob key: '{key}'")
        return self.container_path / key

    def _write_blob(self, key: str, content: str) -> None:
        blob_path = self._get_blob_path(key)
        temp_path = blob_path.with_name(f".{key}.{uuid4().hex}.tmp")
        try:
            temp_path.write_text(content, encoding="utf-8")
            os.replace(temp_path, blob_path)
        finally:
            temp_path.unlink(missing_ok=True)

    def _read_blob(self, key: str) -> str | None:
        blob_path = self._get_blob_path(key)
        try:
            return blob_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def _delete_blob_if_exists(self, key: str) -> bool:
        blob_path = self._get_blob_path(key)
        try:
            blob_path.unlink()
            return True
        except FileNotFoundError:
            return False

    async def write_blob(self, key: str, content: str) -> None:
        await asyncio.to_thread(self._write_blob, key, content)

    async def read_blob(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read_blob, key)

    async def delete_blob_if_exists(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete_blob_if_exists, key)
