import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class InMemorySessionStore:
    """
    Dict backed session store for development and tests.

    Entries are lost on restart and are not shared between processes.
    """

    def __init__(self):
        self.entries: Dict[str, str] = {}

    async def load(self, session_id: str) -> Optional[str]:
        return self.entries.get(session_id)

    async def save(self, session_id: str, payload: str) -> None:
        self.entries[session_id] = payload
        logger.debug(f"Session {session_id[:6]}... saved ({len(payload)} bytes)")

    async def remove(self, session_id: str) -> None:
        if self.entries.pop(session_id, None) is None:
            logger.debug(f"Session {session_id[:6]}... was not stored, nothing to remove")
