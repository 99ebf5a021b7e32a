"""
Library configuration using Pydantic Settings.

Protocol constants live at module level; deployment values can be set via
environment variables (prefix ``COOKIESEAL_``) or a .env file.
"""

from typing import Dict, Literal, Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Clock difference allowed between server and browser when checking seal expiry
TIMESTAMP_SKEW_SEC = 60
FOURTEEN_DAYS_IN_SECONDS = 14 * 24 * 3600

# Token major version, bumped on wire format changes so old cookies fail soft
CURRENT_MAJOR_VERSION = 2
VERSION_DELIMITER = "~"

# Largest Max-Age browsers accept (2^31 - 1)
MAX_COOKIE_MAX_AGE = 2147483647
MAX_COOKIE_LENGTH = 4096

MIN_PASSWORD_LENGTH = 32


class Settings(BaseSettings):
    """Deployment settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="COOKIESEAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    cookie_name: str = "session"
    ttl: int = FOURTEEN_DAYS_IN_SECONDS

    # Single password, or a JSON id -> password map for rotation.
    # The map wins when both are set.
    password: Optional[SecretStr] = None
    passwords: Optional[Dict[int, SecretStr]] = None

    # For development, allow insecure cookies over HTTP
    secure_cookies: bool = True
    same_site: Literal["strict", "lax", "none"] = "lax"
    cookie_domain: Optional[str] = None

    structured_logging: bool = False
    log_level: str = "INFO"

    def session_options(self):
        """Build SessionOptions from the configured values.

        Raises:
            BadUsageError: If neither ``password`` nor ``passwords`` is set
        """
        from cookieseal.core.exceptions import BadUsageError
        from cookieseal.core.schemas.session import CookieOptions, SessionOptions

        if self.passwords:
            password = {
                key: value.get_secret_value() for key, value in self.passwords.items()
            }
        elif self.password is not None:
            password = self.password.get_secret_value()
        else:
            raise BadUsageError(
                "cookieseal: Bad usage. Missing password. "
                "Set COOKIESEAL_PASSWORD or COOKIESEAL_PASSWORDS."
            )

        return SessionOptions(
            cookie_name=self.cookie_name,
            password=password,
            ttl=self.ttl,
            cookie_options=CookieOptions(
                secure=self.secure_cookies,
                same_site=self.same_site,
                domain=self.cookie_domain,
            ),
        )


# Global settings instance
settings = Settings()
