import redis.asyncio as aioredis
import os
import logging

logger = logging.getLogger(__name__)

redis_clients = {}


def get_redis_client() -> aioredis.Redis:
    if 'default' not in redis_clients:
        redis_url = os.getenv("REDIS_URL", "redis://localhost:6379")
        logger.info(f"Creating new default Redis client with: URL {redis_url}")
        redis_clients['default'] = aioredis.from_url(redis_url, decode_responses=True)

    return redis_clients['default']


async def close_redis_clients() -> None:
    for name, client in list(redis_clients.items()):
        logger.info(f"Closing Redis client '{name}'")
        await client.aclose()
        del redis_clients[name]
