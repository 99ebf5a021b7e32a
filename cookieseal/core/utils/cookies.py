"""
Cookie header parsing and Set-Cookie serialization (RFC 6265).
"""

import re
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Dict, Optional

from starlette.requests import cookie_parser

from cookieseal.core.exceptions import BadUsageError
from cookieseal.core.schemas.session import CookieOptions

# token = 1*<any CHAR except CTLs or separators>
_COOKIE_NAME_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
# cookie-octet, no DQUOTE, comma, semicolon or backslash
_COOKIE_VALUE_RE = re.compile(r"^[\x21\x23-\x2B\x2D-\x3A\x3C-\x5B\x5D-\x7E]*$")
_DOMAIN_RE = re.compile(r"^\.?[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?(\.[a-z0-9]([a-z0-9-]{0,61}[a-z0-9])?)*$", re.IGNORECASE)
_PATH_RE = re.compile(r"^[\x20-\x3A\x3C-\x7E]*$")


def parse_cookie_header(header: Optional[str]) -> Dict[str, str]:
    """Parse a ``Cookie`` request header into a name -> value dict"""
    if not header:
        return {}
    return cookie_parser(header)


def _format_expires(expires: datetime) -> str:
    if expires.tzinfo is None:
        expires = expires.replace(tzinfo=timezone.utc)
    return format_datetime(expires.astimezone(timezone.utc), usegmt=True)


def serialize_cookie(name: str, value: str, options: Optional[CookieOptions] = None) -> str:
    """
    Serialize a cookie into a ``Set-Cookie`` header value.

    Args:
        name: Cookie name
        value: Cookie value, already made of cookie-octets
        options: Cookie attributes; unset attributes are omitted

    Returns:
        Header value such as ``sid=abc; Max-Age=3540; Path=/; HttpOnly``

    Raises:
        BadUsageError: If the name, value or an attribute is invalid
    """
    if not _COOKIE_NAME_RE.match(name or ""):
        raise BadUsageError(f"cookieseal: Bad usage. Invalid cookie name: {name!r}")
    if not _COOKIE_VALUE_RE.match(value):
        raise BadUsageError("cookieseal: Bad usage. Invalid cookie value.")

    options = options or CookieOptions()
    parts = [f"{name}={value}"]

    if options.max_age is not None:
        parts.append(f"Max-Age={int(options.max_age)}")

    if options.domain:
        if not _DOMAIN_RE.match(options.domain):
            raise BadUsageError(f"cookieseal: Bad usage. Invalid cookie domain: {options.domain!r}")
        parts.append(f"Domain={options.domain}")

    if options.path:
        if not _PATH_RE.match(options.path):
            raise BadUsageError(f"cookieseal: Bad usage. Invalid cookie path: {options.path!r}")
        parts.append(f"Path={options.path}")

    if options.expires is not None:
        parts.append(f"Expires={_format_expires(options.expires)}")

    if options.http_only:
        parts.append("HttpOnly")

    if options.secure:
        parts.append("Secure")

    if options.partitioned:
        parts.append("Partitioned")

    if options.priority:
        parts.append(f"Priority={options.priority.capitalize()}")

    if options.same_site:
        parts.append(f"SameSite={options.same_site.capitalize()}")

    return "; ".join(parts)
