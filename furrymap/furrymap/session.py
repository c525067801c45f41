"""Session state and the login flow.

One :class:`Session` belongs to one client. Only :class:`SessionManager`
changes its CSRF token and auth state; the cookie jar lives on the HTTP
client it wraps.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx

from furrymap.config import Credentials
from furrymap.dom import attr, load_document
from furrymap.errors import AuthError, ParseError
from furrymap.utils.http import fetch_text

logger = logging.getLogger(__name__)

T = TypeVar("T")

LOGIN_PATH = "/en/login"
SEARCH_PATH = "/en/search/"


class AuthState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


@dataclass
class Session:
    http: httpx.AsyncClient
    csrf_token: str | None = None
    auth_state: AuthState = AuthState.UNAUTHENTICATED

    async def fetch(
        self,
        url: str,
        *,
        method: str = "GET",
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> str:
        return await fetch_text(self.http, url, method=method, data=data, headers=headers)


class SingleFlight(Generic[T]):
    """Share one execution of an async operation between overlapping callers.

    The slot is idle, in progress, or completed. A failed run leaves it idle
    so the next caller starts over.
    """

    def __init__(self) -> None:
        self._pending: asyncio.Future[T] | None = None
        self._completed = False
        self._result: T | None = None

    async def run(self, func: Callable[[], Awaitable[T]]) -> T:
        if self._completed:
            return self._result  # type: ignore[return-value]
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._execute(func))
        # shield: one caller being cancelled must not cancel the shared run
        return await asyncio.shield(self._pending)

    async def _execute(self, func: Callable[[], Awaitable[T]]) -> T:
        try:
            result = await func()
        finally:
            self._pending = None
        self._result = result
        self._completed = True
        return result


class SessionManager:
    """Logs in (when credentials are configured) and captures the search token."""

    def __init__(self, session: Session, credentials: Credentials | None = None) -> None:
        self._session = session
        self._credentials = credentials
        self._flight: SingleFlight[None] = SingleFlight()

    @property
    def session(self) -> Session:
        return self._session

    def is_authenticated(self) -> bool:
        return self._session.auth_state is AuthState.AUTHENTICATED

    async def authenticate(self) -> None:
        """Authenticate once; concurrent callers share the in-flight attempt."""
        await self._flight.run(self._authenticate)

    async def _authenticate(self) -> None:
        self._session.auth_state = AuthState.AUTHENTICATING
        try:
            if self._credentials is not None:
                await self._login(self._credentials)
            self._session.csrf_token = await self._fetch_token(
                SEARCH_PATH, "namefinder__csrf_token"
            )
        except BaseException:
            self._session.auth_state = AuthState.UNAUTHENTICATED
            raise
        self._session.auth_state = AuthState.AUTHENTICATED
        logger.debug("Session ready")

    async def _fetch_token(self, path: str, element_id: str) -> str:
        doc = load_document(await self._session.fetch(path))
        token = attr(doc.find(id=element_id), "value")
        if not token:
            raise ParseError(f"no #{element_id} on {path}")
        return token

    async def _login(self, credentials: Credentials) -> None:
        logger.info("Logging in as %s", credentials.username)
        login_token = await self._fetch_token(LOGIN_PATH, "signin__csrf_token")
        body = await self._session.fetch(
            LOGIN_PATH,
            method="POST",
            data={
                "signin[username]": credentials.username,
                "signin[password]": credentials.password,
                "signin[remember]": "on",
                "signin[_csrf_token]": login_token,
            },
        )
        doc = load_document(body)
        if doc.select_one("#login_form > .error_list") is not None:
            raise AuthError(f"Invalid login for {credentials.username}")
