"""
Load sessions from inbound cookies.

Usage:
    session = await get_session(request, response, options)
    session = await get_session(cookie_store, options)
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from cookieseal.core.exceptions import BadUsageError
from cookieseal.core.schemas.session import SessionOptions
from cookieseal.core.security import PasswordSet
from cookieseal.core.utils.encryption import unseal_data
from cookieseal.session.config import coerce_session_options, get_session_config
from cookieseal.session.session import Session
from cookieseal.session.transports import (
    CookieStoreTransport,
    CookieTransport,
    RequestResponseTransport,
)

logger = logging.getLogger(__name__)

BAD_USAGE_MESSAGE = (
    "cookieseal: Bad usage: use get_session(request, response, options) "
    "or get_session(cookie_store, options)."
)

Options = Union[SessionOptions, Mapping]


def _select_transport(source: Any, response_or_options: Any, options: Optional[Options]):
    """Pick the transport once, returning (transport, options)"""
    if source is None or response_or_options is None:
        raise BadUsageError(BAD_USAGE_MESSAGE)

    if isinstance(source, CookieTransport):
        if options is not None:
            raise BadUsageError(BAD_USAGE_MESSAGE)
        return source, response_or_options

    if options is None:
        return CookieStoreTransport(source), response_or_options

    return RequestResponseTransport(source, response_or_options), options


async def get_session(
    source: Any,
    response_or_options: Any = None,
    options: Optional[Options] = None,
) -> Session:
    """
    Load the session for a request.

    Args:
        source: A request, a cookie store, or a CookieTransport
        response_or_options: The response when ``source`` is a request,
            otherwise the session options
        options: Session options when called with a request/response pair

    Returns:
        Session handle with the unsealed fields, empty when the cookie is
        absent or cannot be trusted

    Raises:
        BadUsageError: For missing arguments, cookie name or password, or a
            password shorter than 32 characters
    """
    transport, session_options = _select_transport(source, response_or_options, options)
    session_options = coerce_session_options(session_options)

    if not session_options.cookie_name:
        raise BadUsageError("cookieseal: Bad usage. Missing cookie name.")

    if not session_options.password:
        raise BadUsageError("cookieseal: Bad usage. Missing password.")

    password_set = PasswordSet.from_password(session_options.password)
    config = get_session_config(session_options)

    seal = transport.read_cookie(config.cookie_name)
    data = {}
    if seal:
        unsealed = await unseal_data(
            seal, password_set, config.ttl, cookie_name=config.cookie_name
        )
        if isinstance(unsealed, dict):
            data = unsealed
        else:
            logger.warning(
                f"Session cookie {config.cookie_name} held a non-mapping payload "
                f"({type(unsealed).__name__}), starting an empty session"
            )

    logger.debug(f"Loaded session {config.cookie_name} with {len(data)} fields")
    return Session(data, config=config, password_set=password_set, transport=transport)
