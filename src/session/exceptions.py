"""Errors raised by the session layer.

Everything here is request-fatal except where noted: the middleware lets these
propagate so the host maps them to a 5xx response.
"""


class SessionError(Exception):
    """Base class for session failures."""


class SessionConfigError(SessionError, ValueError):
    """Invalid session options (e.g. a store that does not implement load/save/remove)."""


class CookieSigningError(SessionError):
    """A signed cookie was read or written but no signing keys are configured."""


class SessionStoreError(SessionError):
    """The session store failed during load, save or remove."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"Session store {operation} failed: {message}")
        self.operation = operation


class SessionAssignmentError(SessionError, TypeError):
    """The handler replaced the session with something that is neither a mapping nor falsy."""


class SessionFinalizedError(SessionError):
    """save() or remove() was called on a session that was already finalized."""
