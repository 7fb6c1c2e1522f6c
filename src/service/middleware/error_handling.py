import logging
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

from session import SessionError

logger = logging.getLogger('service.middleware')


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware to turn unhandled errors, session failures included, into JSON 500 responses"""

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except HTTPException:
            # Http Exceptions are handled by fastapi's default handler
            raise
        except SessionError as exc:
            logger.error(f"Session failure for {request.url}: {exc}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Session could not be processed",
                    "error_code": "session_error",
                    "message": str(exc),
                }
            )
        except Exception as exc:
            logger.error(f"Unexpected error for {request.url}: {str(exc)}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal server error occurred",
                    "error_code": "internal_error",
                    "message": "An unexpected error occurred. Please try again later.",
                }
            )
