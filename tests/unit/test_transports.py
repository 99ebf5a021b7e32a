"""
Unit tests for cookie transports
"""

from types import SimpleNamespace

import pytest

from cookieseal.core.exceptions import BadUsageError
from cookieseal.core.schemas.session import CookieOptions
from cookieseal.session.transports import (
    CookieStore,
    CookieStoreTransport,
    RequestResponseTransport,
)
from tests.utils.helpers import (
    MemoryCookieStore,
    make_dict_response,
    make_request,
    make_response,
    set_cookie_headers,
)

# Mark all tests in this module as unit tests
pytestmark = pytest.mark.unit

OPTIONS = CookieOptions(max_age=60, path="/", http_only=True)


class TestRequestResponseTransport:
    """Test the header based transport"""

    def test_reads_cookie_from_header(self):
        transport = RequestResponseTransport(make_request("other=1; sid=abc~2"), make_response())
        assert transport.read_cookie("sid") == "abc~2"
        assert transport.read_cookie("missing") == ""

    def test_no_cookie_header(self):
        transport = RequestResponseTransport(make_request(), make_response())
        assert transport.read_cookie("sid") == ""

    def test_plain_dict_request_headers(self):
        request = SimpleNamespace(headers={"cookie": "sid=xyz"})
        transport = RequestResponseTransport(request, make_dict_response())
        assert transport.read_cookie("sid") == "xyz"

    def test_appends_to_starlette_headers(self):
        response = make_response()
        response.set_cookie("other", "1")
        transport = RequestResponseTransport(make_request(), response)
        transport.write_cookie("sid", "abc", OPTIONS)
        assert set_cookie_headers(response)[-1] == "sid=abc; Max-Age=60; Path=/; HttpOnly"
        assert len(set_cookie_headers(response)) == 2

    def test_single_existing_value_normalized_into_list(self):
        response = make_dict_response(existing_set_cookie="other=1")
        transport = RequestResponseTransport(make_request(), response)
        transport.write_cookie("sid", "abc", OPTIONS)
        assert response.headers["set-cookie"] == ["other=1", "sid=abc; Max-Age=60; Path=/; HttpOnly"]

    def test_existing_list_extended(self):
        response = make_dict_response(existing_set_cookie=["a=1", "b=2"])
        transport = RequestResponseTransport(make_request(), response)
        transport.write_cookie("sid", "abc", OPTIONS)
        assert response.headers["set-cookie"][:2] == ["a=1", "b=2"]
        assert len(response.headers["set-cookie"]) == 3

    def test_headers_sent(self):
        assert RequestResponseTransport(make_request(), make_dict_response(headers_sent=True)).headers_sent
        assert not RequestResponseTransport(make_request(), make_response()).headers_sent

    @pytest.mark.parametrize("request_obj, response_obj", [
        (None, SimpleNamespace(headers={})),
        (SimpleNamespace(headers={}), None),
        (SimpleNamespace(), SimpleNamespace(headers={})),
        (SimpleNamespace(headers={}), SimpleNamespace()),
    ])
    def test_bad_usage(self, request_obj, response_obj):
        with pytest.raises(BadUsageError):
            RequestResponseTransport(request_obj, response_obj)


class TestCookieStoreTransport:
    """Test the get/set cookie store transport"""

    def test_memory_store_satisfies_protocol(self):
        assert isinstance(MemoryCookieStore(), CookieStore)
        assert not isinstance({}, CookieStore)

    def test_reads_value_objects(self):
        transport = CookieStoreTransport(MemoryCookieStore({"sid": "abc"}))
        assert transport.read_cookie("sid") == "abc"
        assert transport.read_cookie("missing") == ""

    def test_reads_plain_strings(self):
        store = SimpleNamespace(get=lambda name: "abc", set=lambda *a, **k: None)
        assert CookieStoreTransport(store).read_cookie("sid") == "abc"

    def test_writes_attributes_as_keywords(self):
        store = MemoryCookieStore()
        CookieStoreTransport(store).write_cookie("sid", "abc", OPTIONS)
        assert store.set_calls == [
            {"name": "sid", "value": "abc", "max_age": 60, "path": "/", "http_only": True}
        ]

    def test_rejects_invalid_cookie_before_writing(self):
        store = MemoryCookieStore()
        with pytest.raises(BadUsageError):
            CookieStoreTransport(store).write_cookie("bad name", "abc", OPTIONS)
        assert store.set_calls == []

    def test_bad_usage(self):
        with pytest.raises(BadUsageError):
            CookieStoreTransport({"sid": "abc"})

    def test_same_length_measure_as_headers(self):
        header_transport = RequestResponseTransport(make_request(), make_response())
        store_transport = CookieStoreTransport(MemoryCookieStore())
        assert header_transport.cookie_length("sid", "abc", OPTIONS) == \
            store_transport.cookie_length("sid", "abc", OPTIONS)
