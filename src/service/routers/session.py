from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
import logging

from schema import SessionView, SessionUpdate
from service.dependencies import get_session, clear_session

logger = logging.getLogger('service.routers.session')

router = APIRouter(
    prefix="/session",
    tags=["session"],
)


@router.get("")
async def read_session(session: Dict[str, Any] = Depends(get_session)) -> SessionView:
    """Return the current session data. Reading never writes a cookie."""
    return SessionView(data=session)


@router.post("")
async def update_session(update: SessionUpdate, session: Dict[str, Any] = Depends(get_session)) -> SessionView:
    """Merge the given keys into the session."""
    session.update(update.data)
    logger.debug(f"update_session - merged keys: {sorted(update.data)}")
    return SessionView(data=session)


@router.put("")
async def replace_session(update: SessionUpdate, request: Request) -> SessionView:
    """Replace the whole session with the given data."""
    request.state.session = dict(update.data)
    return SessionView(data=request.state.session)


@router.delete("")
async def delete_session(request: Request) -> Dict[str, str]:
    """Destroy the session and expire its cookie."""
    clear_session(request)
    logger.info("delete_session - session cleared")
    return {"message": "session deleted"}
