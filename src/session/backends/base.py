from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class SessionStore(Protocol):
    """
    Persistence contract for store-backed sessions.

    Payloads are the serialized session data (a JSON object string without the
    session id). All three operations may suspend and may fail; failures must
    propagate, the session layer never swallows them.
    """

    async def load(self, session_id: str) -> Optional[str]:
        """Return the stored payload, or None if there is no entry for session_id."""
        ...

    async def save(self, session_id: str, payload: str) -> None:
        ...

    async def remove(self, session_id: str) -> None:
        ...
