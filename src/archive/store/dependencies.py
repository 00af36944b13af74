from fastapi import Request

from src.archive.store.base import ArchiveStore


def get_archive_store(request: Request) -> ArchiveStore:
    return request.app.state.archive_store
