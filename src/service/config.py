"""
Configuration setup for the session service.

This module handles all configuration initialization including:
- Session cookie options
- Cookie signing keys
- Session store selection (cookie, memory or redis)
"""
import os
import logging
from typing import Any, Optional

from session import COOKIE_STORE, InMemorySessionStore, RedisSessionStore, SessionOptions, normalize_options
from .redis_client import get_redis_client

logger = logging.getLogger('service.config')


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def get_signing_keys() -> list[str]:
    """
    Parse the cookie signing keys from SESSION_SECRET_KEYS.

    Keys are comma separated; the last key signs new cookies and every key is
    accepted when verifying, so rotating means appending a key.
    """
    keys = [key.strip() for key in os.getenv("SESSION_SECRET_KEYS", "").split(",") if key.strip()]
    if not keys:
        logger.warning("SESSION_SECRET_KEYS not set, signed session cookies will fail")
    return keys


def get_cookie_options() -> dict[str, Any]:
    cookie_options: dict[str, Any] = {
        "signed": _env_flag("SESSION_SIGNED", "true"),
        # For development, allow insecure cookies over HTTP
        "secure": _env_flag("SECURE_COOKIES", "false"),
        "samesite": os.getenv("SESSION_COOKIE_SAMESITE", "lax").lower(),
    }
    if max_age := os.getenv("SESSION_COOKIE_MAX_AGE"):
        cookie_options["max_age"] = int(max_age)
    if domain := os.getenv("COOKIE_DOMAIN"):
        cookie_options["domain"] = domain
    return cookie_options


def get_session_store() -> Any:
    """Build the session store selected by SESSION_STORE."""
    store_type = os.getenv("SESSION_STORE", COOKIE_STORE).lower()

    if store_type == COOKIE_STORE:
        return COOKIE_STORE
    if store_type == "memory":
        logger.warning("Using in-memory session store, sessions will not survive a restart")
        return InMemorySessionStore()
    if store_type == "redis":
        ttl: Optional[str] = os.getenv("SESSION_TTL_SECONDS")
        return RedisSessionStore(
            get_redis_client(),
            prefix=os.getenv("SESSION_REDIS_PREFIX", "session:"),
            ttl_seconds=int(ttl) if ttl else None,
        )

    raise ValueError(f"Unsupported SESSION_STORE '{store_type}', must be one of: cookie, memory, redis")


def get_session_options() -> SessionOptions:
    """
    Parse and return session options from environment variables.

    Returns:
        Normalized SessionOptions
    """
    return normalize_options(
        cookie_name=os.getenv("SESSION_COOKIE_NAME"),
        cookie_options=get_cookie_options(),
        store=get_session_store(),
    )


__all__ = [
    'get_signing_keys',
    'get_cookie_options',
    'get_session_store',
    'get_session_options',
]
