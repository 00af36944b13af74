from fastapi import HTTPException, status, Depends
from src.config import Settings, get_settings


def workers_enabled_check(settings: Settings = Depends(get_settings)):
    """Guards the routes that publish a task snapshot to the archive queue.

    Without a worker consuming `QUEUE_NAME` the snapshot would sit in the
    broker and the archive would never catch up with the task store.
    """
    if not settings.WORKERS_ENABLED:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Creating or updating a task publishes a snapshot to the '{settings.QUEUE_NAME}' queue, which needs an archive worker. Set WORKERS_ENABLED to True to enable workers.",
        )
