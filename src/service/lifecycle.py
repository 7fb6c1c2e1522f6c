import logging
from typing import AsyncGenerator
from fastapi import FastAPI
from contextlib import asynccontextmanager

from .redis_client import close_redis_clients

logger = logging.getLogger("service.lifecycle")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Session service starting")
    yield

    # Cleanup during shutdown
    await close_redis_clients()
    logger.info("Session service stopped")
