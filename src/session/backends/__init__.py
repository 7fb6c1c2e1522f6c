"""Session store implementations."""

from .base import SessionStore
from .memory_backend import InMemorySessionStore
from .redis_backend import RedisSessionStore

__all__ = [
    "SessionStore",
    "InMemorySessionStore",
    "RedisSessionStore",
]
