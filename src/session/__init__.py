"""Request-scoped sessions persisted in a cookie or in a pluggable store."""

from .backends import SessionStore, InMemorySessionStore, RedisSessionStore
from .config import normalize_options
from .cookies import CookieJar
from .exceptions import (
    SessionError,
    SessionConfigError,
    CookieSigningError,
    SessionStoreError,
    SessionAssignmentError,
    SessionFinalizedError,
)
from .manager import (
    Session,
    CookieBackedSession,
    StoreBackedSession,
    open_session,
    finalize_session,
    SESSION_ID_KEY,
)
from .models import COOKIE_STORE, CookieOptions, SessionOptions

__all__ = [
    "SessionStore",
    "InMemorySessionStore",
    "RedisSessionStore",
    "normalize_options",
    "CookieJar",
    "SessionError",
    "SessionConfigError",
    "CookieSigningError",
    "SessionStoreError",
    "SessionAssignmentError",
    "SessionFinalizedError",
    "Session",
    "CookieBackedSession",
    "StoreBackedSession",
    "open_session",
    "finalize_session",
    "SESSION_ID_KEY",
    "COOKIE_STORE",
    "CookieOptions",
    "SessionOptions",
]
