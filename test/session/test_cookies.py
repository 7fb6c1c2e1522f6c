import pytest
from datetime import datetime, timezone
from itsdangerous import Signer
from starlette.responses import Response

from session import CookieJar, CookieOptions, CookieSigningError
from conftest import TEST_KEYS, make_request, cookie_value

UNSIGNED = CookieOptions(signed=False)


def signed(name: str, value: str, keys=TEST_KEYS) -> str:
    return Signer(keys, salt=f"cookie:{name}").sign(value).decode("utf-8")


class TestCookieJarGet:
    def test_missing_cookie(self):
        jar = CookieJar(make_request(), TEST_KEYS)
        assert jar.get("sess") is None

    def test_unsigned_value(self):
        jar = CookieJar(make_request('sess={"a":1}'))
        assert jar.get("sess", UNSIGNED) == '{"a":1}'

    def test_signed_value(self):
        jar = CookieJar(make_request(f"sess={signed('sess', 'hello')}"), TEST_KEYS)
        assert jar.get("sess") == "hello"

    def test_signed_with_rotated_key(self):
        old_cookie = signed("sess", "hello", keys=["old-test-key"])
        jar = CookieJar(make_request(f"sess={old_cookie}"), TEST_KEYS)
        assert jar.get("sess") == "hello"

    def test_bad_signature_is_absent(self):
        jar = CookieJar(make_request("sess=hello.forged"), TEST_KEYS)
        assert jar.get("sess") is None

    def test_unsigned_cookie_read_as_signed_is_absent(self):
        jar = CookieJar(make_request("sess=hello"), TEST_KEYS)
        assert jar.get("sess") is None

    def test_signature_bound_to_cookie_name(self):
        jar = CookieJar(make_request(f"sess={signed('other', 'hello')}"), TEST_KEYS)
        assert jar.get("sess") is None

    def test_signed_read_without_keys_fails(self):
        jar = CookieJar(make_request("sess=hello.sig"))
        with pytest.raises(CookieSigningError):
            jar.get("sess")

    def test_no_cookie_without_keys_is_fine(self):
        assert CookieJar(make_request()).get("sess") is None


class TestCookieJarSet:
    def test_nothing_written_until_applied(self):
        jar = CookieJar(make_request(), TEST_KEYS)
        jar.set("sess", "hello")
        assert len(jar.pending) == 1

        response = Response()
        assert response.headers.getlist("set-cookie") == []
        jar.apply(response)
        assert len(response.headers.getlist("set-cookie")) == 1
        assert jar.pending == []

    def test_default_attributes(self):
        jar = CookieJar(make_request(), TEST_KEYS)
        jar.set("sess", "hello")
        response = Response()
        jar.apply(response)

        header = response.headers["set-cookie"]
        assert header.startswith("sess=")
        assert "HttpOnly" in header
        assert "Path=/" in header
        assert "samesite=lax" in header.lower()

    def test_signed_value_round_trips(self):
        jar = CookieJar(make_request(), TEST_KEYS)
        jar.set("sess", '{"message":"hello"}')
        response = Response()
        jar.apply(response)

        value = cookie_value(response.headers["set-cookie"])
        assert Signer(TEST_KEYS, salt="cookie:sess").unsign(value).decode() == '{"message":"hello"}'

    def test_signed_write_without_keys_fails(self):
        jar = CookieJar(make_request())
        with pytest.raises(CookieSigningError):
            jar.set("sess", "hello")

    def test_unsigned_write_without_keys(self):
        jar = CookieJar(make_request())
        jar.set("sess", "hello", UNSIGNED)
        response = Response()
        jar.apply(response)
        assert cookie_value(response.headers["set-cookie"]) == "hello"

    def test_overwrite_replaces_earlier_write(self):
        jar = CookieJar(make_request())
        jar.set("sess", "first", UNSIGNED)
        jar.set("sess", "second", UNSIGNED)
        assert [value for _, value, _ in jar.pending] == ["second"]

    def test_overwrite_replaces_header_already_on_response(self):
        response = Response()
        response.set_cookie("sess", "from-handler")
        response.set_cookie("other", "kept")

        jar = CookieJar(make_request())
        jar.set("sess", "from-jar", UNSIGNED)
        jar.apply(response)

        headers = response.headers.getlist("set-cookie")
        assert len(headers) == 2
        assert any(h.startswith("other=kept") for h in headers)
        assert any(h.startswith("sess=from-jar") for h in headers)

    def test_without_overwrite_both_are_kept(self):
        options = CookieOptions(signed=False, overwrite=False)
        jar = CookieJar(make_request())
        jar.set("sess", "first", options)
        jar.set("sess", "second", options)
        assert len(jar.pending) == 2

    def test_expires_in_the_past(self):
        jar = CookieJar(make_request())
        jar.set("sess", "", {"signed": False, "expires": datetime(1970, 1, 1, tzinfo=timezone.utc)})
        response = Response()
        jar.apply(response)
        assert "expires=Thu, 01 Jan 1970 00:00:00 GMT" in response.headers["set-cookie"]

    def test_unsupported_options_are_ignored(self):
        jar = CookieJar(make_request())
        jar.set("sess", "hello", {"signed": False, "some_flag": True})
        response = Response()
        jar.apply(response)
        assert "some_flag" not in response.headers["set-cookie"]
