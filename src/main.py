import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import ConnectionError

from src.common.exceptions import (
    ConcurrencyConflictException,
    KnownException,
    ResourceAlreadyExistsException,
    ResourceNotFoundException,
    concurrency_conflict_handler,
    known_exception_handler,
    resource_already_exists_handler,
    resource_not_found_handler,
    unexpected_exception_handler,
    redis_connection_exception_handler,
    validation_exception_handler,
    service_unavailable_response,
    internal_error_response,
)
from src.common.opentelemetry import setup_opentelemetry
from src.common.redis import create_redis_client
from src.config import get_settings
from src.archive.store.backend import get_archive_store_backend
from src.tasks.router import router as tasks_router
from src.tasks.store.backend import get_task_store_backend
from src.healthcheck.router import router as health_router
from src.work_queue.celery_queue import CeleryWorkQueue
from src.celery import celery_app

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    redis_client = create_redis_client(settings.REDIS_URL)
    app.state.redis_client = redis_client
    app.state.celery_app = celery_app
    app.state.task_store = get_task_store_backend(redis_client, settings)
    app.state.archive_store = get_archive_store_backend(redis_client, settings)
    app.state.work_queue = CeleryWorkQueue(queue_name=settings.QUEUE_NAME)
    logger.info(
        f"Using '{settings.TASK_STORE_BACKEND}' task store and '{settings.ARCHIVE_BACKEND}' archive"
    )
    yield
    await redis_client.aclose()


app = FastAPI(
    title=settings.API_NAME,
    summary=settings.API_SUMMARY,
    lifespan=lifespan,
    responses={
        **service_unavailable_response,
        **internal_error_response,
    },
    version=settings.TASK_TRACKER_VERSION,
)

if settings.OTEL_ENABLED:
    setup_opentelemetry(settings.OTEL_SERVICE_NAME, app)

if settings.CORS_ENABLED:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.exception_handler(RequestValidationError)(validation_exception_handler)
app.exception_handler(ResourceNotFoundException)(resource_not_found_handler)
app.exception_handler(ResourceAlreadyExistsException)(resource_already_exists_handler)
app.exception_handler(ConcurrencyConflictException)(concurrency_conflict_handler)
app.exception_handler(KnownException)(known_exception_handler)
app.exception_handler(ConnectionError)(redis_connection_exception_handler)
app.exception_handler(Exception)(unexpected_exception_handler)


app.include_router(health_router)
app.include_router(tasks_router)
