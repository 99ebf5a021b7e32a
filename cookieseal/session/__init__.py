"""Session lifecycle: load, mutate, save, destroy."""

from .config import SessionConfig, compute_cookie_max_age, get_session_config
from .manager import get_session
from .session import Session
from .transports import (
    CookieStore,
    CookieStoreTransport,
    CookieTransport,
    RequestResponseTransport,
)

__all__ = [
    "get_session",
    "Session",
    "SessionConfig",
    "get_session_config",
    "compute_cookie_max_age",
    "CookieStore",
    "CookieTransport",
    "CookieStoreTransport",
    "RequestResponseTransport",
]
