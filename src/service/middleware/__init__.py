import logging as log
from typing import Sequence
from fastapi import FastAPI

from session import SessionOptions

from .logging import RequestResponseLoggingMiddleware
from .error_handling import ErrorHandlingMiddleware
from .session import SessionMiddleware

logger = log.getLogger('service.middleware')


def setup_middleware(app: FastAPI, session_options: SessionOptions, signing_keys: Sequence[str]):
    """
    Setup all middleware for the FastAPI application.

    Middleware are added in reverse order (last added = first executed).
    Current order of execution:
    1. ErrorHandlingMiddleware (turns session and unexpected errors into JSON 500s)
    2. RequestResponseLoggingMiddleware (logs requests/responses)
    3. SessionMiddleware (opens the session, saves or removes it after the handler)

    Args:
        app: FastAPI application instance
        session_options: normalized session options
        signing_keys: keys used to sign the session cookie
    """
    app.add_middleware(SessionMiddleware, options=session_options, keys=signing_keys)

    app.add_middleware(RequestResponseLoggingMiddleware, cookie_name=session_options.cookie_name)

    app.add_middleware(ErrorHandlingMiddleware)

    store_name = 'cookie' if session_options.uses_cookie_store else type(session_options.store).__name__
    logger.info(f"Session middleware configured with cookie '{session_options.cookie_name}' and {store_name} store")


__all__ = [
    'setup_middleware',
    'RequestResponseLoggingMiddleware',
    'ErrorHandlingMiddleware',
    'SessionMiddleware',
]
