import logging
from typing import Optional, Sequence

from fastapi import FastAPI

from session import SessionOptions

from .config import get_session_options, get_signing_keys
from .lifecycle import lifespan
from .middleware import setup_middleware
from .routers import misc, session as session_router

logger = logging.getLogger('service')


def create_app(
    session_options: Optional[SessionOptions] = None,
    signing_keys: Optional[Sequence[str]] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        session_options: defaults to the options read from the environment
        signing_keys: defaults to SESSION_SECRET_KEYS

    Returns:
        Configured FastAPI instance
    """
    if session_options is None:
        session_options = get_session_options()
    if signing_keys is None:
        signing_keys = get_signing_keys()

    app = FastAPI(lifespan=lifespan)
    setup_middleware(app, session_options, signing_keys)

    app.include_router(misc.router)
    app.include_router(session_router.router)

    return app
