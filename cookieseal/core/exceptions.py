"""Exception hierarchy for cookieseal.

Two families matter to callers:

- ``BadUsageError`` and its subclasses are configuration or call mistakes.
  They propagate and should be fixed by the caller.
- ``SealError`` and its subclasses describe an inbound cookie that cannot be
  trusted. ``unseal_data`` recovers from these and returns an empty session.
"""


class CookieSealError(Exception):
    """Base class for all cookieseal errors"""
    pass


class BadUsageError(CookieSealError, ValueError):
    """Raised for missing or malformed options and arguments"""
    pass


class HeadersAlreadySentError(BadUsageError):
    """Raised when save() runs after the response headers went out"""
    pass


class CookieTooLargeError(BadUsageError):
    """Raised when a sealed cookie exceeds what browsers accept"""

    def __init__(self, length: int):
        self.length = length
        super().__init__(
            f"cookieseal: Cookie length is too big ({length} bytes), "
            "browsers will refuse it. Try to remove some data."
        )


class SealError(CookieSealError):
    """An inbound seal is malformed, forged, expired or foreign"""
    pass


class SealFormatError(SealError):
    pass


class UnsupportedSealVersionError(SealError):
    pass


class IncorrectComponentCountError(SealError):
    pass


class PasswordNotFoundError(SealError):
    pass


class ExpiredSealError(SealError):
    pass


class InvalidSignatureError(SealError):
    pass


class DecryptionError(SealError):
    pass
