"""
FastAPI integration.

    session_dependency = SessionDependency(options)

    @app.post("/login")
    async def login(session: Session = Depends(session_dependency)):
        session["user_id"] = 42
        await session.save()

Cookies are written to the Response FastAPI injects into the dependency;
FastAPI merges those headers into the response the endpoint returns.
"""

import logging
from typing import Any, Mapping, Optional, Union

from fastapi import Request, Response

from cookieseal.core.config import settings
from cookieseal.core.schemas.session import SessionOptions
from cookieseal.session.manager import get_session
from cookieseal.session.session import Session

logger = logging.getLogger(__name__)


class SessionDependency:
    """Callable dependency loading a Session for the current request."""

    def __init__(self, options: Optional[Union[SessionOptions, Mapping[str, Any]]] = None):
        self.options = options

    def resolve_options(self) -> Union[SessionOptions, Mapping[str, Any]]:
        if self.options is not None:
            return self.options
        return settings.session_options()

    async def __call__(self, request: Request, response: Response) -> Session:
        return await get_session(request, response, self.resolve_options())
