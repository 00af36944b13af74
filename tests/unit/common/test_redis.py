import pytest

from src.common.redis import create_redis_client


def test_create_redis_client_decodes_responses() -> None:
    client = create_redis_client("redis://localhost:6379/0")

    assert client.get_connection_kwargs()["decode_responses"] is True


def test_create_redis_client_invalid_url() -> None:
    with pytest.raises(RuntimeError, match="Invalid Redis URL"):
        create_redis_client("localhost:6379")
