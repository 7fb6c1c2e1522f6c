"""
FastAPI dependencies for the session service.

Route handlers receive the live session dict through ``get_session``; mutating
it is all that is needed for the change to be persisted when the request
completes.
"""
from typing import Any, Dict

from fastapi import Request, HTTPException


def get_session(request: Request) -> Dict[str, Any]:
    """Returns the session dict attached by SessionMiddleware."""
    session = getattr(request.state, 'session', None)
    if session is None:
        raise HTTPException(status_code=500, detail="SessionMiddleware is not installed or the session was cleared")
    return session


def clear_session(request: Request) -> None:
    """Marks the session for removal; the cookie is expired when the response is sent."""
    request.state.session = None
