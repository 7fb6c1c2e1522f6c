import logging
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request, HTTPException

logger = logging.getLogger('service.middleware')


class RequestResponseLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log requests and responses, including session cookie traffic"""

    def __init__(self, app, cookie_name: str):
        super().__init__(app)
        self.cookie_name = cookie_name

    async def dispatch(self, request: Request, call_next):
        logger.debug(f"REQUEST_DEBUG: {request.method} {request.url}")

        # Check for session cookie specifically
        session_cookie_value = request.cookies.get(self.cookie_name)
        logger.debug(f"REQUEST_DEBUG: Session cookie present: {bool(session_cookie_value)}")
        if session_cookie_value:
            logger.debug(f"REQUEST_DEBUG: Session cookie length: {len(session_cookie_value)}")

        try:
            response = await call_next(request)

            logger.debug(f"RESPONSE_DEBUG: Status {response.status_code}")
            set_cookies = [
                v for k, v in response.raw_headers
                if k == b"set-cookie" and v.startswith(f"{self.cookie_name}=".encode("latin-1"))
            ]
            logger.debug(f"RESPONSE_DEBUG: Session cookie written: {bool(set_cookies)}")

            if response.status_code >= 400:
                logger.error(f"ERROR_RESPONSE_DEBUG: Status {response.status_code} for {request.url}")

            return response

        except HTTPException as exc:
            logger.error(f"HTTP_EXCEPTION_DEBUG: Status {exc.status_code}, Detail: {exc.detail}")
            raise
        except Exception as exc:
            logger.error(f"UNEXPECTED_EXCEPTION_DEBUG: {type(exc)}: {str(exc)}")
            raise
