"""
Cookie jar bound to a single request/response pair.

Reads come from the incoming request, writes are buffered and applied to the
outgoing Starlette response with ``apply()``. Signed cookies carry an
itsdangerous signature appended to the value (``<value>.<signature>``); the
signer is salted with the cookie name so a value cannot be replayed under a
different cookie.
"""
import logging
from typing import Any, Mapping, Optional, Sequence, Union

from itsdangerous import BadSignature, Signer
from starlette.requests import Request
from starlette.responses import Response

from .exceptions import CookieSigningError
from .models import CookieOptions

logger = logging.getLogger(__name__)

CookieOptionsLike = Union[CookieOptions, Mapping[str, Any], None]

# Options understood by Response.set_cookie, mapped from CookieOptions field names
_SET_COOKIE_ARGS = {
    "max_age": "max_age",
    "expires": "expires",
    "path": "path",
    "domain": "domain",
    "secure": "secure",
    "http_only": "httponly",
    "samesite": "samesite",
}
# Consumed by the jar itself
_JAR_ARGS = {"signed", "overwrite"}


def _options_dict(options: CookieOptionsLike) -> dict[str, Any]:
    if options is None:
        return CookieOptions().model_dump()
    if isinstance(options, CookieOptions):
        return options.model_dump()
    return CookieOptions.model_validate(dict(options)).model_dump()


class CookieJar:
    def __init__(self, request: Request, keys: Optional[Sequence[str]] = None):
        """
        Args:
            request: the incoming request whose cookies are read
            keys: signing keys, the last one signs and all of them verify
        """
        self.request = request
        self.keys = list(keys) if keys else []
        self._pending: list[tuple[str, str, dict[str, Any]]] = []

    def _signer(self, name: str) -> Signer:
        if not self.keys:
            raise CookieSigningError("Signing keys are required for signed cookies")
        return Signer(self.keys, salt=f"cookie:{name}")

    @property
    def pending(self) -> list[tuple[str, str, dict[str, Any]]]:
        return list(self._pending)

    def get(self, name: str, options: CookieOptionsLike = None) -> Optional[str]:
        """Return the cookie value, or None when it is missing or its signature does not verify."""
        value = self.request.cookies.get(name)
        if value is None:
            return None

        if not _options_dict(options)["signed"]:
            return value

        try:
            return self._signer(name).unsign(value).decode("utf-8")
        except BadSignature:
            logger.warning(f"Ignoring cookie '{name}' with an invalid signature")
            return None

    def set(self, name: str, value: str, options: CookieOptionsLike = None) -> None:
        opts = _options_dict(options)

        if opts["signed"]:
            value = self._signer(name).sign(value).decode("utf-8")

        if opts["overwrite"]:
            self._pending = [entry for entry in self._pending if entry[0] != name]

        self._pending.append((name, value, opts))

    def apply(self, response: Response) -> None:
        """Write the buffered cookies onto the response as Set-Cookie headers."""
        for name, value, opts in self._pending:
            if opts["overwrite"]:
                prefix = f"{name}=".encode("latin-1")
                response.raw_headers[:] = [
                    (k, v) for k, v in response.raw_headers
                    if not (k == b"set-cookie" and v.startswith(prefix))
                ]

            kwargs = {}
            for key, option_value in opts.items():
                if key in _SET_COOKIE_ARGS:
                    kwargs[_SET_COOKIE_ARGS[key]] = option_value
                elif key not in _JAR_ARGS:
                    logger.debug(f"Cookie option '{key}' is not supported by the response, skipping")

            response.set_cookie(name, value, **kwargs)
            logger.debug(f"Set-Cookie '{name}' ({len(value)} bytes)")

        self._pending.clear()
