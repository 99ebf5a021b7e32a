"""The Session handle returned by get_session()."""

import logging
from collections.abc import MutableMapping
from typing import Any, Dict, Iterator, Mapping, Union

from cookieseal.core.config import MAX_COOKIE_LENGTH
from cookieseal.core.exceptions import CookieTooLargeError, HeadersAlreadySentError
from cookieseal.core.schemas.session import SessionOptions
from cookieseal.core.security import PasswordSet
from cookieseal.core.utils.encryption import seal_data
from cookieseal.session.config import SessionConfig, get_session_config
from cookieseal.session.transports import CookieTransport

logger = logging.getLogger(__name__)


class Session(MutableMapping):
    """Mutable session data plus the operations that persist it.

    Fields are accessed like a dict (``session["user_id"] = 42``). The
    configuration, passwords and transport are private to the handle, so
    any field name is available to the caller.
    """

    def __init__(
        self,
        data: Dict[str, Any],
        *,
        config: SessionConfig,
        password_set: PasswordSet,
        transport: CookieTransport,
    ):
        self._data = data
        self._config = config
        self._password_set = password_set
        self._transport = transport

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Session(cookie_name={self._config.cookie_name!r}, fields={list(self._data)})"

    @property
    def config(self) -> SessionConfig:
        return self._config

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    async def save(self) -> None:
        """
        Seal the current fields and set the session cookie.

        Raises:
            HeadersAlreadySentError: If the response headers were already sent
            CookieTooLargeError: If the cookie would exceed 4096 bytes
        """
        if self._transport.headers_sent:
            raise HeadersAlreadySentError(
                "cookieseal: Cannot set session cookie: session.save() was called after "
                "headers were sent. Make sure to call it before the response is sent."
            )

        config = self._config
        seal = await seal_data(self._data, self._password_set, config.ttl)

        cookie_length = self._transport.cookie_length(config.cookie_name, seal, config.cookie_options)
        if cookie_length > MAX_COOKIE_LENGTH:
            raise CookieTooLargeError(cookie_length)

        self._transport.write_cookie(config.cookie_name, seal, config.cookie_options)
        logger.debug(
            f"Saved session cookie {config.cookie_name} ({cookie_length} bytes, "
            f"password id {self._password_set.current_id})"
        )

    def destroy(self) -> None:
        """Clear every field and tell the browser to drop the cookie."""
        self._data.clear()

        config = self._config
        cookie_options = config.cookie_options.model_copy(update={"max_age": 0})
        self._transport.write_cookie(config.cookie_name, "", cookie_options)
        logger.debug(f"Destroyed session cookie {config.cookie_name}")

    def update_config(self, options: Union[SessionOptions, Mapping[str, Any]]) -> None:
        """Replace the configuration used by later save() and destroy() calls.

        Fields are untouched and nothing is resealed until save() runs.
        """
        self._config = get_session_config(options)
