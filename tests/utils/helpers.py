"""
Test helper functions and doubles for common testing operations

These helpers provide cookie stores, request/response doubles and
Set-Cookie parsing used across the test suite.
"""

import base64
import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from starlette.requests import Request
from starlette.responses import Response


class MemoryCookieStore:
    """Cookie store double mirroring a get/set cookie API"""

    def __init__(self, cookies: Optional[Dict[str, str]] = None):
        self.cookies = dict(cookies or {})
        self.set_calls: List[Dict[str, Any]] = []

    def get(self, name: str):
        if name not in self.cookies:
            return None
        return SimpleNamespace(name=name, value=self.cookies[name])

    def set(self, name: str, value: str, **attributes: Any) -> None:
        self.cookies[name] = value
        self.set_calls.append({"name": name, "value": value, **attributes})


def make_request(cookie_header: Optional[str] = None) -> Request:
    """Build a Starlette request carrying an optional Cookie header"""
    headers = []
    if cookie_header is not None:
        headers.append((b"cookie", cookie_header.encode("latin-1")))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


def make_response() -> Response:
    return Response()


def make_dict_response(existing_set_cookie: Any = None, headers_sent: bool = False):
    """Response double whose headers are a plain dict"""
    headers: Dict[str, Any] = {}
    if existing_set_cookie is not None:
        headers["set-cookie"] = existing_set_cookie
    return SimpleNamespace(headers=headers, headers_sent=headers_sent)


def set_cookie_headers(response: Any) -> List[str]:
    """Return every Set-Cookie value written to a response"""
    headers = response.headers
    if hasattr(headers, "getlist"):
        return headers.getlist("set-cookie")
    value = headers.get("set-cookie", [])
    return value if isinstance(value, list) else [value]


def parse_set_cookie(header: str) -> Dict[str, Any]:
    """Split a Set-Cookie value into name, value and attributes"""
    first, *attributes = header.split("; ")
    name, _, value = first.partition("=")
    parsed: Dict[str, Any] = {"name": name, "value": value, "attributes": {}}
    for attribute in attributes:
        key, sep, attr_value = attribute.partition("=")
        parsed["attributes"][key] = attr_value if sep else True
    return parsed


def decode_seal_components(seal: str) -> Dict[str, Any]:
    payload, _, _ = seal.partition("~")
    return json.loads(base64.urlsafe_b64decode(payload + "=" * (-len(payload) % 4)))


def encode_seal_components(components: Dict[str, Any], version: str = "2") -> str:
    payload = json.dumps(components, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(payload).rstrip(b"=").decode("ascii") + "~" + version


def flip_component_byte(seal: str, component: str, index: int = 0) -> str:
    """Flip one byte inside a base64url component of a seal"""
    components = decode_seal_components(seal)
    raw = bytearray(
        base64.urlsafe_b64decode(components[component] + "=" * (-len(components[component]) % 4))
    )
    raw[index] ^= 0x01
    components[component] = base64.urlsafe_b64encode(bytes(raw)).rstrip(b"=").decode("ascii")
    return encode_seal_components(components)
