"""
Per-request session lifecycle.

A session is opened at the start of a request, handed to the handlers as a plain
dict, and finalized exactly once when the handlers return: ``save()`` persists
and/or rewrites the cookie only when something changed, ``remove()`` deletes the
store entry and expires the cookie.

Two storage modes share the same interface:

- CookieBackedSession: the cookie holds the whole session, ``{"_sid": ..., **data}``
- StoreBackedSession: the cookie holds only ``{"_sid": ...}`` and the data lives
  in a SessionStore under that id
"""
import json
import logging
import secrets
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from .backends.base import SessionStore
from .cookies import CookieJar
from .exceptions import SessionAssignmentError, SessionError, SessionFinalizedError, SessionStoreError
from .models import SessionOptions

logger = logging.getLogger(__name__)

SESSION_ID_KEY = "_sid"
SESSION_ID_BYTES = 18
EXPIRED = datetime(1970, 1, 1, tzinfo=timezone.utc)


def generate_session_id() -> str:
    return secrets.token_urlsafe(SESSION_ID_BYTES)


def serialize(data: Mapping[str, Any]) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"))


def parse_cookie_value(raw: Optional[str]) -> Dict[str, Any]:
    """Parse a raw cookie value into a dict. Anything unparsable is an empty session."""
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.debug("Session cookie is not valid JSON, starting an empty session")
        return {}
    if not isinstance(parsed, dict):
        logger.debug(f"Session cookie holds a {type(parsed).__name__}, starting an empty session")
        return {}
    return parsed


def _mask(session_id: str) -> str:
    return f"{session_id[:6]}..."


class Session:
    """Common lifecycle for both storage modes."""

    def __init__(self, jar: CookieJar, options: SessionOptions, session_id: Optional[str]):
        self._jar = jar
        self.options = options
        self.is_new = not session_id
        self.id = session_id or generate_session_id()
        self.data: Dict[str, Any] = {}
        self.previous_serialized: Optional[str] = None
        self.finalized = False

    def __repr__(self):
        return f"<{type(self).__name__} id={_mask(self.id)} new={self.is_new} data={self.to_json()}>"

    def to_json(self) -> str:
        return serialize(self.data)

    async def load(self) -> Dict[str, Any]:
        raise NotImplementedError

    def _payload(self) -> str:
        raise NotImplementedError

    async def _persist(self, payload: str) -> None:
        """Write a changed payload. Returns after the change is durable."""
        raise NotImplementedError

    def _cookie_value(self, payload: str) -> str:
        raise NotImplementedError

    def _cookie_needed(self, changed: bool) -> bool:
        raise NotImplementedError

    def _mark_finalized(self) -> None:
        if self.finalized:
            raise SessionFinalizedError(f"Session {_mask(self.id)} was already finalized")
        self.finalized = True

    async def save(self) -> bool:
        """
        Persist the session if it changed.

        A new session that was never populated leaves no trace. A new, populated
        session always gets its cookie.

        Returns:
            True if anything was written (cookie or store)
        """
        self._mark_finalized()
        self.data.pop(SESSION_ID_KEY, None)

        if self.is_new and not self.data:
            logger.debug(f"New session {_mask(self.id)} was never populated, nothing to save")
            return False

        payload = self._payload()
        changed = payload != self.previous_serialized

        if changed:
            await self._persist(payload)

        if self._cookie_needed(changed):
            self._jar.set(self.options.cookie_name, self._cookie_value(payload), self.options.cookie_options)

        if changed or self.is_new:
            logger.debug(f"Session {_mask(self.id)} saved (new={self.is_new}, changed={changed})")
            return True

        logger.debug(f"Session {_mask(self.id)} unchanged")
        return False

    async def _discard(self) -> None:
        """Drop any persisted state for this session."""

    async def remove(self) -> None:
        """Destroy the session and expire its cookie."""
        self._mark_finalized()
        await self._discard()

        # Max-Age wins over Expires in browsers, so both must say "gone"
        expired = self.options.cookie_options.with_updates(expires=EXPIRED, max_age=0)
        self._jar.set(self.options.cookie_name, "", expired)
        logger.debug(f"Session {_mask(self.id)} removed")


class CookieBackedSession(Session):
    """The cookie is the store. No external calls are made."""

    def __init__(self, jar: CookieJar, options: SessionOptions, raw_cookie: Optional[str], parsed: Dict[str, Any]):
        super().__init__(jar, options, parsed.get(SESSION_ID_KEY))
        self.data = {k: v for k, v in parsed.items() if k != SESSION_ID_KEY}
        # Compare against the bytes we received, not a re-serialization of them
        self.previous_serialized = raw_cookie

    async def load(self) -> Dict[str, Any]:
        return self.data

    def _payload(self) -> str:
        return serialize({**self.data, SESSION_ID_KEY: self.id})

    async def _persist(self, payload: str) -> None:
        pass

    def _cookie_value(self, payload: str) -> str:
        return payload

    def _cookie_needed(self, changed: bool) -> bool:
        # New sessions always differ from the missing cookie
        return changed


class StoreBackedSession(Session):
    """The cookie carries the id only; data lives in ``options.store``."""

    def __init__(self, jar: CookieJar, options: SessionOptions, parsed: Dict[str, Any]):
        super().__init__(jar, options, parsed.get(SESSION_ID_KEY))
        self.store: SessionStore = options.store

    async def _call_store(self, operation: str, *args: Any) -> Any:
        try:
            return await getattr(self.store, operation)(self.id, *args)
        except SessionError:
            raise
        except Exception as e:
            logger.error(f"Session store {operation} failed for session {_mask(self.id)}: {e}")
            raise SessionStoreError(operation, str(e)) from e

    async def load(self) -> Dict[str, Any]:
        empty = serialize({})
        payload = await self._call_store("load")
        if payload is None:
            logger.debug(f"No stored data for session {_mask(self.id)}")
            payload = empty

        try:
            data = json.loads(payload)
        except (TypeError, ValueError) as e:
            raise SessionStoreError("load", f"stored payload is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise SessionStoreError("load", f"stored payload is a {type(data).__name__}, expected an object")

        data.pop(SESSION_ID_KEY, None)
        self.data = data
        self.previous_serialized = payload
        return self.data

    def _payload(self) -> str:
        return serialize(self.data)

    async def _persist(self, payload: str) -> None:
        await self._call_store("save", payload)

    def _cookie_value(self, payload: str) -> str:
        return serialize({SESSION_ID_KEY: self.id})

    def _cookie_needed(self, changed: bool) -> bool:
        # The id never changes, so only a new session needs its cookie
        return self.is_new

    async def _discard(self) -> None:
        await self._call_store("remove")


async def finalize_session(session: Session, value: Any) -> None:
    """
    Save or remove ``session`` depending on what the handler left in its place.

    A mapping (even an empty one) is saved, anything falsy removes the session,
    and anything else is a programming error in the handler.
    """
    if isinstance(value, Mapping):
        if value is not session.data:
            session.data = dict(value)
        await session.save()
    elif not value:
        await session.remove()
    else:
        raise SessionAssignmentError(
            f"Session must be a mapping or a falsy value to clear it, got {type(value).__name__}"
        )


async def open_session(jar: CookieJar, options: SessionOptions) -> Session:
    """
    Read the session cookie, pick the storage mode and load prior state.

    Raises:
        CookieSigningError: the cookie is signed but the host has no signing keys
        SessionStoreError: the store failed to load
    """
    raw_cookie = jar.get(options.cookie_name, options.cookie_options)
    parsed = parse_cookie_value(raw_cookie)

    sid = parsed.get(SESSION_ID_KEY)
    if not isinstance(sid, str) or not sid:
        parsed.pop(SESSION_ID_KEY, None)

    if options.uses_cookie_store:
        session: Session = CookieBackedSession(jar, options, raw_cookie, parsed)
    else:
        session = StoreBackedSession(jar, options, parsed)

    await session.load()
    logger.debug(f"Opened {session!r}")
    return session
