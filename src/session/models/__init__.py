# Session option models
from datetime import datetime
from typing import Any, Optional, Literal

from pydantic import BaseModel, ConfigDict, Field

COOKIE_STORE = "cookie"
DEFAULT_COOKIE_NAME = "sess"


class CookieOptions(BaseModel):
    """
    Options handed to the cookie jar for every read and write of the session cookie.

    Unknown keys are kept (``extra="allow"``) and passed through untouched, the
    session layer never interprets them.
    """
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    http_only: bool = Field(default=True, alias="httpOnly")
    signed: bool = True
    overwrite: bool = True
    path: str = "/"
    domain: Optional[str] = None
    secure: bool = False
    samesite: Optional[Literal["lax", "strict", "none"]] = Field(default="lax", alias="sameSite")
    max_age: Optional[int] = Field(default=None, alias="maxAge")
    expires: Optional[datetime | int | str] = None

    def with_updates(self, **updates: Any) -> "CookieOptions":
        return self.model_copy(update=updates)


class SessionOptions(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    cookie_name: str = DEFAULT_COOKIE_NAME
    cookie_options: CookieOptions = Field(default_factory=CookieOptions)
    # Either the COOKIE_STORE marker or an object implementing SessionStore
    store: Any = COOKIE_STORE

    @property
    def uses_cookie_store(self) -> bool:
        return self.store is None or self.store == COOKIE_STORE
