from fastapi import Request
from redis.asyncio import Redis
from typing import TYPE_CHECKING


RedisClient = Redis
if TYPE_CHECKING:
    RedisClient = Redis[str]  # type: ignore


def create_redis_client(redis_url: str) -> RedisClient:
    """Async client shared by the task store, the archive store and the healthcheck.

    Responses are decoded so task hashes and archived snapshots come back as `str`.
    """
    try:
        return Redis.from_url(redis_url, decode_responses=True)
    except ValueError as e:
        raise RuntimeError(f"Invalid Redis URL for the task tracker: {redis_url}") from e


def get_redis_client(request: Request) -> RedisClient:
    return request.app.state.redis_client
