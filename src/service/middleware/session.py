import logging
from typing import Any, Mapping, Optional, Sequence, Union

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from fastapi import Request

from session import CookieJar, SessionOptions, finalize_session, normalize_options, open_session

logger = logging.getLogger('service.middleware.session')


class SessionMiddleware(BaseHTTPMiddleware):
    """
    Attach a session to every request and persist it after the handlers return.

    Handlers read and mutate ``request.state.session`` (a dict). Setting it to
    None (or any falsy non-mapping value) destroys the session. If a handler
    raises, the session is left untouched and no cookie is written.
    """

    def __init__(
        self,
        app: ASGIApp,
        options: Optional[Union[Mapping[str, Any], SessionOptions]] = None,
        keys: Optional[Sequence[str]] = None,
    ):
        super().__init__(app)
        self.options = normalize_options(options)
        self.keys = list(keys) if keys else []
        if self.options.cookie_options.signed and not self.keys:
            logger.warning("Signed session cookies are enabled but no signing keys are configured")

    async def dispatch(self, request: Request, call_next):
        jar = CookieJar(request, self.keys)
        session = await open_session(jar, self.options)
        request.state.session = session.data

        response = await call_next(request)

        await finalize_session(session, getattr(request.state, 'session', None))
        jar.apply(response)
        return response
