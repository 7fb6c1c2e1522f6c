import pytest
from unittest.mock import AsyncMock, Mock
from redis import RedisError, ConnectionError as RedisConnectionError

from session.backends.redis_backend import RedisSessionStore
from session.exceptions import SessionStoreError


def make_client(**methods):
    redis_client = Mock()
    redis_client.get = AsyncMock(return_value=methods.get("get"))
    redis_client.set = AsyncMock()
    redis_client.delete = AsyncMock(return_value=methods.get("delete", 1))
    return redis_client


@pytest.mark.asyncio
async def test_redis_store_load():
    redis_client = make_client(get='{"message":"hello"}')
    store = RedisSessionStore(redis_client)

    result = await store.load("abc")

    redis_client.get.assert_called_once_with("session:abc")
    assert result == '{"message":"hello"}'


@pytest.mark.asyncio
async def test_redis_store_load_decodes_bytes():
    store = RedisSessionStore(make_client(get=b'{"message":"hello"}'))
    assert await store.load("abc") == '{"message":"hello"}'


@pytest.mark.asyncio
async def test_redis_store_load_not_found():
    store = RedisSessionStore(make_client(get=None))
    assert await store.load("abc") is None


@pytest.mark.asyncio
async def test_redis_store_save():
    redis_client = make_client()
    store = RedisSessionStore(redis_client, prefix="app:", ttl_seconds=60)

    await store.save("abc", '{"message":"hello"}')

    redis_client.set.assert_called_once_with("app:abc", '{"message":"hello"}', ex=60)


@pytest.mark.asyncio
async def test_redis_store_save_without_ttl():
    redis_client = make_client()
    store = RedisSessionStore(redis_client)

    await store.save("abc", "{}")

    redis_client.set.assert_called_once_with("session:abc", "{}", ex=None)


@pytest.mark.asyncio
async def test_redis_store_remove():
    redis_client = make_client()
    store = RedisSessionStore(redis_client)

    await store.remove("abc")

    redis_client.delete.assert_called_once_with("session:abc")


@pytest.mark.asyncio
async def test_redis_store_remove_missing_key_is_not_an_error():
    store = RedisSessionStore(make_client(delete=0))
    await store.remove("abc")


@pytest.mark.asyncio
async def test_redis_store_connection_error():
    redis_client = make_client()
    redis_client.get.side_effect = RedisConnectionError("refused")
    store = RedisSessionStore(redis_client)

    with pytest.raises(SessionStoreError, match="database connection error") as exc_info:
        await store.load("abc")
    assert exc_info.value.operation == "load"


@pytest.mark.asyncio
async def test_redis_store_redis_error():
    redis_client = make_client()
    redis_client.set.side_effect = RedisError("READONLY")
    store = RedisSessionStore(redis_client)

    with pytest.raises(SessionStoreError, match="database error"):
        await store.save("abc", "{}")


@pytest.mark.asyncio
async def test_redis_store_unexpected_error():
    redis_client = make_client()
    redis_client.delete.side_effect = ValueError("bad")
    store = RedisSessionStore(redis_client)

    with pytest.raises(SessionStoreError, match="unexpected error"):
        await store.remove("abc")
