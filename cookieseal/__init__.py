"""
cookieseal - stateless, encrypted cookie sessions.

Session data is sealed (encrypted and signed) into the cookie itself; no
server-side store is involved.
"""

from cookieseal.core.config import CURRENT_MAJOR_VERSION, settings
from cookieseal.core.exceptions import (
    BadUsageError,
    CookieSealError,
    CookieTooLargeError,
    HeadersAlreadySentError,
    SealError,
)
from cookieseal.core.schemas.session import CookieOptions, SessionOptions
from cookieseal.core.security import PasswordSet, generate_secure_password
from cookieseal.core.utils.encryption import seal_data, unseal_data
from cookieseal.session import (
    CookieStore,
    CookieStoreTransport,
    CookieTransport,
    RequestResponseTransport,
    Session,
    get_session,
)

__version__ = "1.0.0"

__all__ = [
    "get_session",
    "seal_data",
    "unseal_data",
    "Session",
    "SessionOptions",
    "CookieOptions",
    "PasswordSet",
    "generate_secure_password",
    "CookieStore",
    "CookieTransport",
    "CookieStoreTransport",
    "RequestResponseTransport",
    "CookieSealError",
    "BadUsageError",
    "HeadersAlreadySentError",
    "CookieTooLargeError",
    "SealError",
    "CURRENT_MAJOR_VERSION",
    "settings",
]
