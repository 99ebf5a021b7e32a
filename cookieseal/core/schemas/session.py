"""Session option schemas"""

from datetime import datetime
from typing import Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cookieseal.core.config import FOURTEEN_DAYS_IN_SECONDS


class CookieOptions(BaseModel):
    """Set-Cookie attributes.

    Only explicitly set fields override the defaults, so
    ``CookieOptions(max_age=None)`` differs from ``CookieOptions()``: the
    former asks for a browser-session cookie. camelCase names (``maxAge``,
    ``httpOnly``, ``sameSite``) are accepted as aliases.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    domain: Optional[str] = None
    path: Optional[str] = None
    secure: Optional[bool] = None
    http_only: Optional[bool] = Field(None, alias="httpOnly")
    same_site: Optional[Literal["strict", "lax", "none"]] = Field(None, alias="sameSite")
    max_age: Optional[int] = Field(None, alias="maxAge")
    priority: Optional[Literal["low", "medium", "high"]] = None
    expires: Optional[datetime] = None
    partitioned: Optional[bool] = None

    @field_validator("same_site", "priority", mode="before")
    @classmethod
    def lowercase_enum(cls, v):
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator("max_age")
    @classmethod
    def validate_max_age(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("max_age must not be negative")
        return v

    def explicit(self) -> Dict[str, object]:
        """Return only the attributes the caller set"""
        return self.model_dump(exclude_unset=True)


class SessionOptions(BaseModel):
    """Caller-supplied session options.

    ``cookie_name`` and ``password`` are required in practice; they are
    optional here so that their absence is reported as a cookieseal usage
    error instead of a schema error.
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    cookie_name: Optional[str] = Field(None, alias="cookieName")
    password: Optional[Union[str, Dict[int, str]]] = Field(None, repr=False)
    ttl: int = Field(FOURTEEN_DAYS_IN_SECONDS, ge=0)
    cookie_options: CookieOptions = Field(default_factory=CookieOptions, alias="cookieOptions")
