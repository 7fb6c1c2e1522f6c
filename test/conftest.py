import sys
from pathlib import Path
from http.cookies import SimpleCookie
from typing import Optional
from unittest.mock import AsyncMock

import pytest
import logging

from starlette.requests import Request

# Add src to sys.path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from session import CookieJar, InMemorySessionStore, normalize_options  # noqa: E402

TEST_KEYS = ["old-test-key", "test-key"]


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Configure logging for tests."""
    logging.basicConfig(level=logging.DEBUG)


def make_request(cookie_header: Optional[str] = None) -> Request:
    """Build a bare Starlette request carrying the given Cookie header."""
    headers = [(b"cookie", cookie_header.encode("latin-1"))] if cookie_header else []
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/",
        "query_string": b"",
        "headers": headers,
    })


def set_cookie_headers(response, name: str = "sess") -> list[str]:
    return [h for h in response.headers.get_list("set-cookie") if h.startswith(f"{name}=")]


def cookie_pair(set_cookie_header: str) -> str:
    """The ``name=value`` part of a Set-Cookie header, ready to send back as a Cookie header."""
    return set_cookie_header.split(";", 1)[0]


def cookie_value(set_cookie_header: str) -> str:
    """The unquoted value of a Set-Cookie header."""
    parsed = SimpleCookie()
    parsed.load(set_cookie_header)
    return next(iter(parsed.values())).value


@pytest.fixture
def memory_store():
    """In-memory store whose saves are counted through ``save.await_count``."""
    store = InMemorySessionStore()
    store.save = AsyncMock(wraps=store.save)
    return store


@pytest.fixture
def cookie_options():
    return normalize_options({"cookie_options": {"signed": False}})


@pytest.fixture
def signed_jar_factory():
    def factory(cookie_header: Optional[str] = None) -> CookieJar:
        return CookieJar(make_request(cookie_header), TEST_KEYS)
    return factory
