"""Cookie transports.

A transport reads the inbound session cookie and writes outbound cookies.
Two kinds exist, chosen once when the session is loaded:

- ``RequestResponseTransport`` for a request/response pair, working on the
  ``Cookie`` and ``Set-Cookie`` headers
- ``CookieStoreTransport`` for a get/set cookie store, used where headers are
  not directly addressable (server-side rendering contexts, test doubles)

Both serialize cookies identically, so the seal and the size guard behave
the same whichever transport is in use.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, runtime_checkable

from cookieseal.core.exceptions import BadUsageError
from cookieseal.core.schemas.session import CookieOptions
from cookieseal.core.utils.cookies import parse_cookie_header, serialize_cookie

logger = logging.getLogger(__name__)


@runtime_checkable
class CookieStore(Protocol):
    """Minimal cookie store interface.

    ``get`` returns the cookie value as a string, an object exposing
    ``.value``, or ``None``. ``set`` receives attributes as keyword
    arguments named like ``CookieOptions`` fields.
    """

    def get(self, name: str) -> Any:
        ...

    def set(self, name: str, value: str, **attributes: Any) -> None:
        ...


class CookieTransport(ABC):
    """Abstract base class for reading and writing the session cookie."""

    @abstractmethod
    def read_cookie(self, name: str) -> str:
        """Return the inbound cookie value, or "" when absent."""
        pass

    @abstractmethod
    def write_cookie(self, name: str, value: str, options: CookieOptions) -> None:
        """Emit a cookie on the outbound side."""
        pass

    @property
    def headers_sent(self) -> bool:
        """Whether it is too late to attach a cookie."""
        return False

    def cookie_length(self, name: str, value: str, options: CookieOptions) -> int:
        """Byte length of the serialized cookie, used by the size guard"""
        return len(serialize_cookie(name, value, options).encode("utf-8"))


class RequestResponseTransport(CookieTransport):
    """Header-based transport for a request/response pair.

    The request must expose ``headers.get("cookie")`` (Starlette, httpx and
    plain dicts all do). The response headers are written either through an
    ``append`` method (Starlette ``MutableHeaders``) or, for plain dict
    headers, by turning any existing ``set-cookie`` value into a list and
    adding to it.
    """

    def __init__(self, request: Any, response: Any):
        if request is None or response is None:
            raise BadUsageError(
                "cookieseal: Bad usage: use get_session(request, response, options) "
                "or get_session(cookie_store, options)."
            )
        if not hasattr(getattr(request, "headers", None), "get"):
            raise BadUsageError("cookieseal: Bad usage. Request has no readable headers.")

        headers = getattr(response, "headers", None)
        if headers is None:
            raise BadUsageError("cookieseal: Bad usage. Response has no writable headers.")

        self.request = request
        self.response = response
        if callable(getattr(headers, "append", None)):
            self._append_header = headers.append
        else:
            self._append_header = self._append_to_mapping

    def read_cookie(self, name: str) -> str:
        header = self.request.headers.get("cookie")
        return parse_cookie_header(header).get(name, "")

    def _append_to_mapping(self, key: str, value: str) -> None:
        headers = self.response.headers
        existing = headers.get(key, [])
        if not isinstance(existing, list):
            existing = [str(existing)]
        headers[key] = [*existing, value]

    def write_cookie(self, name: str, value: str, options: CookieOptions) -> None:
        self._append_header("set-cookie", serialize_cookie(name, value, options))

    @property
    def headers_sent(self) -> bool:
        return bool(getattr(self.response, "headers_sent", False))


class CookieStoreTransport(CookieTransport):
    """Transport over a get/set cookie store."""

    def __init__(self, cookie_store: CookieStore):
        if not isinstance(cookie_store, CookieStore):
            raise BadUsageError(
                "cookieseal: Bad usage: use get_session(request, response, options) "
                "or get_session(cookie_store, options)."
            )
        self.cookie_store = cookie_store

    def read_cookie(self, name: str) -> str:
        cookie = self.cookie_store.get(name)
        if isinstance(cookie, str):
            return cookie
        value: Optional[str] = getattr(cookie, "value", None)
        if isinstance(value, str):
            return value
        return ""

    def write_cookie(self, name: str, value: str, options: CookieOptions) -> None:
        # Validates the cookie the same way the header transport does
        serialize_cookie(name, value, options)
        self.cookie_store.set(name, value, **options.model_dump(exclude_none=True))
