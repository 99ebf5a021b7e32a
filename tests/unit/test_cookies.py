"""
Unit tests for Cookie header parsing and Set-Cookie serialization
"""

from datetime import datetime, timezone

import pytest

from cookieseal.core.exceptions import BadUsageError
from cookieseal.core.schemas.session import CookieOptions
from cookieseal.core.utils.cookies import parse_cookie_header, serialize_cookie

# Mark all tests in this module as unit tests
pytestmark = pytest.mark.unit


class TestParseCookieHeader:
    """Test parsing inbound Cookie headers"""

    def test_empty(self):
        assert parse_cookie_header(None) == {}
        assert parse_cookie_header("") == {}

    def test_multiple_cookies(self):
        assert parse_cookie_header("a=1; sid=abc~2; b=two") == {"a": "1", "sid": "abc~2", "b": "two"}


class TestSerializeCookie:
    """Test Set-Cookie serialization"""

    def test_name_and_value_only(self):
        assert serialize_cookie("sid", "abc") == "sid=abc"

    def test_full_attribute_order(self):
        options = CookieOptions(
            max_age=3540,
            domain="example.com",
            path="/",
            expires=datetime(2030, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
            http_only=True,
            secure=True,
            partitioned=True,
            priority="high",
            same_site="lax",
        )
        assert serialize_cookie("sid", "abc", options) == (
            "sid=abc; Max-Age=3540; Domain=example.com; Path=/; "
            "Expires=Wed, 02 Jan 2030 03:04:05 GMT; HttpOnly; Secure; Partitioned; "
            "Priority=High; SameSite=Lax"
        )

    def test_max_age_zero_emitted(self):
        assert serialize_cookie("sid", "", CookieOptions(max_age=0)) == "sid=; Max-Age=0"

    def test_false_flags_omitted(self):
        options = CookieOptions(http_only=False, secure=False)
        assert serialize_cookie("sid", "abc", options) == "sid=abc"

    def test_naive_expires_treated_as_utc(self):
        options = CookieOptions(expires=datetime(2030, 1, 2, 3, 4, 5))
        assert "Expires=Wed, 02 Jan 2030 03:04:05 GMT" in serialize_cookie("sid", "abc", options)

    @pytest.mark.parametrize("name", ["", "bad name", "semi;colon", "eq=ual"])
    def test_invalid_name(self, name):
        with pytest.raises(BadUsageError):
            serialize_cookie(name, "abc")

    @pytest.mark.parametrize("value", ["has space", "semi;colon", 'quo"te'])
    def test_invalid_value(self, value):
        with pytest.raises(BadUsageError):
            serialize_cookie("sid", value)

    def test_invalid_domain(self):
        with pytest.raises(BadUsageError):
            serialize_cookie("sid", "abc", CookieOptions(domain="bad domain"))

    def test_invalid_path(self):
        with pytest.raises(BadUsageError):
            serialize_cookie("sid", "abc", CookieOptions(path="/a;b"))
