"""The public furrymap client."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from types import TracebackType
from urllib.parse import quote

import httpx
from bs4 import BeautifulSoup

from furrymap.cache import MarkerCache
from furrymap.config import Config
from furrymap.dom import load_document
from furrymap.extractors import (
    extract_full_profile,
    extract_markers,
    extract_profile_summaries,
)
from furrymap.geo import CountryLookup, ReverseGeocodeLookup
from furrymap.models import FullProfile, MarkerFeedEntry, SearchResult
from furrymap.session import SEARCH_PATH, Session, SessionManager
from furrymap.utils.http import build_client

logger = logging.getLogger(__name__)

SEARCH_FILTERS = ("furries", "markers")


class FurryMap:
    """Async client for furrymap.net.

    Use as an async context manager, or call :meth:`aclose` when done::

        async with FurryMap(Config(credentials=...)) as client:
            result = await client.search("fox")
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        country_lookup: CountryLookup | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or Config()
        self._lookup = country_lookup or ReverseGeocodeLookup()
        self._session = Session(
            http=build_client(
                self.config.base_url,
                timeout=self.config.http_timeout,
                transport=transport,
            )
        )
        self._auth = SessionManager(self._session, self.config.credentials)
        self._markers = MarkerCache(
            self._session,
            self.config.cache_name,
            self._lookup,
            user_agent=self.config.feed_user_agent,
        )

    async def __aenter__(self) -> FurryMap:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._session.http.aclose()

    def is_authenticated(self) -> bool:
        return self._auth.is_authenticated()

    async def authenticate(self) -> None:
        await self._auth.authenticate()

    async def _ensure_authenticated(self) -> None:
        if not self._auth.is_authenticated():
            await self._auth.authenticate()

    async def _load_page(
        self,
        url: str,
        *,
        method: str = "GET",
        data: dict[str, str] | None = None,
    ) -> BeautifulSoup:
        return load_document(await self._session.fetch(url, method=method, data=data))

    def _extract_search(self, doc: BeautifulSoup) -> SearchResult:
        return SearchResult(
            users=extract_profile_summaries(doc),
            markers=extract_markers(doc, self._lookup),
        )

    async def search(self, name: str, filter: str | None = None) -> SearchResult:
        """Search users and markers by name.

        *filter* narrows the results to ``"furries"`` or ``"markers"``; leave it
        empty for both.
        """
        if filter and filter not in SEARCH_FILTERS:
            raise ValueError(f"Unknown search filter: {filter!r}")
        await self._ensure_authenticated()

        doc = await self._load_page(
            SEARCH_PATH,
            method="POST",
            data={
                "namefinder[search]": name,
                "namefinder[showhidden]": filter or "",
                "namefinder[_csrf_token]": self._session.csrf_token or "",
            },
        )
        # country lookups block
        result = await asyncio.to_thread(self._extract_search, doc)
        logger.debug(
            "Search %r: %d users, %d markers", name, len(result.users), len(result.markers)
        )
        return result

    async def get_profile(self, user_name: str, *, today: date | None = None) -> FullProfile:
        await self._ensure_authenticated()
        doc = await self._load_page(f"/profile/{quote(user_name, safe='')}")
        return await asyncio.to_thread(
            extract_full_profile, doc, self._lookup, today=today
        )

    async def load_markers(self, force_refresh: bool = False) -> list[MarkerFeedEntry]:
        """Return the full marker feed, from the cache file unless *force_refresh*."""
        return await self._markers.load(force_refresh)
