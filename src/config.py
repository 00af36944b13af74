from functools import lru_cache
from typing import Any, Literal
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Application Configuration
    TASK_TRACKER_VERSION: str = "v0.1.x"
    API_NAME: str = "Task Tracker"
    API_SUMMARY: str = "Track tasks and keep a durable archive of every task's state"

    WORKERS_ENABLED: bool = True
    TASK_RETENTION_DAYS: int = 7
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    CORS_ENABLED: bool = False
    CORS_ORIGINS: list[str] = ["*"]

    # Database Configuration
    REDIS_URL: str = "redis://localhost:6379"
    POSTGRES_URL: str = "postgresql://localhost:5432/task_tracker"  # Assumes a local Postgres db named 'task_tracker' exists

    TASK_STORE_BACKEND: Literal["postgres", "redis"] = "postgres"
    TASK_STORE_NAMESPACE: str = "tasks"
    TASK_PARTITION_KEY: str = "TasksPartition"

    # Queue Configuration
    QUEUE_NAME: str = "task-queue"

    # Archive Configuration
    ARCHIVE_BACKEND: Literal["redis", "filesystem"] = "redis"
    ARCHIVE_NAMESPACE: str = "tasks"
    ARCHIVE_PATH: str = "./archive"

    # OpenTelemetry Settings
    OTEL_ENABLED: bool = False
    OTEL_SERVICE_NAME: str = "task-tracker"

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, v: Any):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    def validate_list_from_string(cls, v: Any):
        if isinstance(v, str):
            return [item.strip() for item in v.split(",")]
        return v

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings():
    return Settings()
