import asyncio
import logging
from typing import Any
from celery import current_task
from celery.exceptions import Ignore

from src.config import get_settings
from src.celery import celery_app
from src.common.redis import create_redis_client
from src.archive.processor import ArchiveProcessor
from src.archive.store.backend import get_archive_store_backend
from src.archive.store.base import get_archive_blob_key


@celery_app.task(name="Archive Task Snapshot")
def archive_task_snapshot(message: str) -> dict[str, Any]:
    """Celery task that writes one queued task snapshot to the archive.

    Failures are recorded on the task result and the message is consumed;
    nothing is retried.
    """
    settings = get_settings()
    redis_client = create_redis_client(settings.REDIS_URL)
    loop: asyncio.AbstractEventLoop | None = None

    try:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)

        archive_store = get_archive_store_backend(redis_client, settings)
        processor = ArchiveProcessor(archive_store)
        snapshot = loop.run_until_complete(processor.process_message(message))

        if snapshot is None:
            return {"message": "Queue message dropped."}

        return {
            "task_id": snapshot.id,
            "blob": get_archive_blob_key(snapshot.id),
            "message": "Task snapshot archived.",
        }
    except Exception as e:
        logging.exception("Failed to archive task snapshot.")
        current_task.update_state(
            state="FAILURE",
            meta={
                "message": "Failed to archive task snapshot.",
                "error": str(e),
                "exc_type": type(e).__name__,
            },
        )
        raise Ignore()

    finally:
        if loop:
            loop.run_until_complete(redis_client.aclose())
            loop.close()
