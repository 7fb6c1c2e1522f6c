"""
Session options normalization.

Turns whatever the application passes to the middleware (a mapping, an existing
SessionOptions, or nothing) into a complete, immutable SessionOptions value.
Cookie options are merged key by key over the defaults, so ``{"signed": False}``
keeps ``http_only`` and ``overwrite`` switched on.
"""
import inspect
import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from .backends.base import SessionStore
from .exceptions import SessionConfigError
from .models import COOKIE_STORE, DEFAULT_COOKIE_NAME, CookieOptions, SessionOptions

logger = logging.getLogger(__name__)

# Older configuration names still accepted
_ALIASES = {
    "key": "cookie_name",
    "cookie": "cookie_options",
}
_KNOWN_KEYS = {"cookie_name", "cookie_options", "store"}
_STORE_METHODS = ("load", "save", "remove")


def _resolve_store(store: Any) -> Any:
    if store is None or store == COOKIE_STORE:
        return COOKIE_STORE
    if isinstance(store, str) or not isinstance(store, SessionStore):
        raise SessionConfigError(
            f"store must be {COOKIE_STORE!r} or implement load/save/remove, got {type(store).__name__}"
        )
    # The protocol check only sees attribute names
    blocking = [name for name in _STORE_METHODS if not inspect.iscoroutinefunction(getattr(store, name))]
    if blocking:
        raise SessionConfigError(
            f"store methods must be async, {type(store).__name__} has synchronous {', '.join(blocking)}"
        )
    return store


def _as_dict(raw: Union[Mapping[str, Any], SessionOptions, None]) -> dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, SessionOptions):
        return {
            "cookie_name": raw.cookie_name,
            "cookie_options": raw.cookie_options.model_dump(),
            "store": raw.store,
        }
    if isinstance(raw, Mapping):
        return {_ALIASES.get(k, k): v for k, v in raw.items()}
    raise SessionConfigError(f"Session options must be a mapping, got {type(raw).__name__}")


def normalize_options(raw: Optional[Union[Mapping[str, Any], SessionOptions]] = None, **overrides: Any) -> SessionOptions:
    """
    Build fully populated session options. Never mutates ``raw``.

    Args:
        raw: partial options, may be None
        **overrides: applied on top of ``raw``

    Returns:
        Frozen SessionOptions

    Raises:
        SessionConfigError: unknown top-level keys, bad cookie options or an invalid store
    """
    source = _as_dict(raw)
    source.update({_ALIASES.get(k, k): v for k, v in overrides.items()})

    unknown = set(source) - _KNOWN_KEYS
    if unknown:
        raise SessionConfigError(f"Unknown session option(s): {', '.join(sorted(unknown))}")

    cookie_raw = source.get("cookie_options") or {}
    if isinstance(cookie_raw, CookieOptions):
        cookie_raw = cookie_raw.model_dump()
    if not isinstance(cookie_raw, Mapping):
        raise SessionConfigError(f"cookie_options must be a mapping, got {type(cookie_raw).__name__}")

    try:
        cookie_options = CookieOptions.model_validate(dict(cookie_raw))
    except ValidationError as e:
        raise SessionConfigError(f"Invalid cookie options: {e}") from e

    options = SessionOptions(
        cookie_name=source.get("cookie_name") or DEFAULT_COOKIE_NAME,
        cookie_options=cookie_options,
        store=_resolve_store(source.get("store")),
    )

    store_name = COOKIE_STORE if options.uses_cookie_store else type(options.store).__name__
    logger.debug(
        f"Session options: cookie_name={options.cookie_name}, store={store_name}, "
        f"cookie_options={options.cookie_options.model_dump()}"
    )
    return options
