"""Resolve caller options into the effective session configuration."""

from dataclasses import dataclass
from typing import Any, Mapping, Union

from pydantic import ValidationError

from cookieseal.core.config import (
    FOURTEEN_DAYS_IN_SECONDS,
    MAX_COOKIE_MAX_AGE,
    TIMESTAMP_SKEW_SEC,
)
from cookieseal.core.exceptions import BadUsageError
from cookieseal.core.schemas.session import CookieOptions, SessionOptions

DEFAULT_TTL = FOURTEEN_DAYS_IN_SECONDS
DEFAULT_COOKIE_OPTIONS = {
    "http_only": True,
    "secure": True,
    "same_site": "lax",
    "path": "/",
}


@dataclass(frozen=True)
class SessionConfig:
    """Effective configuration used by save() and destroy()"""

    cookie_name: str
    ttl: int
    cookie_options: CookieOptions


def coerce_session_options(options: Union[SessionOptions, Mapping[str, Any]]) -> SessionOptions:
    """Accept SessionOptions or a plain dict, reporting schema problems as usage errors"""
    if isinstance(options, SessionOptions):
        return options
    if not isinstance(options, Mapping):
        raise BadUsageError("cookieseal: Bad usage. Session options must be a mapping or SessionOptions.")
    try:
        return SessionOptions.model_validate(dict(options))
    except ValidationError as e:
        raise BadUsageError(f"cookieseal: Bad usage. Invalid session options: {e}") from e


def compute_cookie_max_age(ttl: int) -> int:
    if ttl == 0:
        # ttl = 0 means no expiration, but cookies cannot live forever
        return MAX_COOKIE_MAX_AGE

    # Browser must drop the cookie before the server considers the seal expired
    return ttl - TIMESTAMP_SKEW_SEC


def get_session_config(options: Union[SessionOptions, Mapping[str, Any]]) -> SessionConfig:
    """
    Merge options with the defaults.

    An explicit ``max_age`` (including ``None``) is kept as given; ``None``
    produces a browser-session cookie and the seal is treated as never
    expiring. Otherwise Max-Age is derived from the ttl.
    """
    options = coerce_session_options(options)

    explicit = options.cookie_options.explicit()
    cookie_options = CookieOptions(**{**DEFAULT_COOKIE_OPTIONS, **explicit})
    ttl = options.ttl

    if "max_age" in explicit:
        if explicit["max_age"] is None:
            # session cookies, no Max-Age, token considered infinite
            ttl = 0
    else:
        cookie_options = cookie_options.model_copy(
            update={"max_age": compute_cookie_max_age(ttl)}
        )

    return SessionConfig(
        cookie_name=options.cookie_name,
        ttl=ttl,
        cookie_options=cookie_options,
    )
