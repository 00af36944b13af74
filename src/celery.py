from datetime import timedelta
import logging
from typing import Any
from celery import Celery, signals
from fastapi import Request

from src.config import get_settings

settings = get_settings()

redis_url = settings.REDIS_URL

# Late acks plus reject-on-worker-lost give at-least-once delivery: a message
# is only removed from the queue after the archive task body has finished.
celery_app = Celery(
    __name__,
    broker=redis_url,
    backend=redis_url,
    broker_connection_retry_on_startup=True,
    include=["src.archive.tasks"],
    result_expires=timedelta(days=settings.TASK_RETENTION_DAYS),
    task_default_queue=settings.QUEUE_NAME,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
)


@signals.setup_logging.connect
def setup_celery_logging(**kwargs: Any) -> None:
    logging.basicConfig(level=settings.LOG_LEVEL)


def get_celery_app(request: Request) -> Celery:
    return request.app.state.celery_app
