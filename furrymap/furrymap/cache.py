"""Marker feed download and its file cache."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from furrymap.errors import CacheMiss
from furrymap.geo import CountryLookup
from furrymap.models import Location, MarkerFeedEntry
from furrymap.session import Session

logger = logging.getLogger(__name__)

FEED_PATH = "en/marker/list/type/combined"

_ENTRIES = TypeAdapter(list[MarkerFeedEntry])


def parse_feed_entry(entry: list[Any], lookup: CountryLookup) -> MarkerFeedEntry:
    """Map ``[lon, lat, id, description, opacity, user, profile, avatar]``."""
    longitude, latitude, marker_id, description, opacity, user_name, profile, avatar = entry
    return MarkerFeedEntry(
        id=marker_id,
        user_name=user_name,
        description=description,
        opacity_factor=opacity,
        location=Location(
            longitude=longitude,
            latitude=latitude,
            country=lookup.lookup(longitude, latitude),
        ),
        profile_url=str(profile),
        profile_image_url=None if avatar == 0 else f"/images/avatar/{avatar}.png",
    )


def trusted_entry(item: dict[str, Any]) -> MarkerFeedEntry:
    """Load a cached entry, keeping fields as stored when they do not validate."""
    try:
        return MarkerFeedEntry.model_validate(item)
    except ValidationError:
        logger.debug("Keeping unvalidated cache entry %r", item.get("id"))
    data = dict(item)
    location = data.get("location")
    if isinstance(location, dict):
        try:
            data["location"] = Location.model_validate(location)
        except ValidationError:
            data["location"] = Location.model_construct(**location)
    return MarkerFeedEntry.model_construct(**data)


def parse_feed(body: str, lookup: CountryLookup) -> list[MarkerFeedEntry]:
    features = json.loads(body)["combined"]["geojson"]["features"]
    return [parse_feed_entry(entry, lookup) for entry in features]


class MarkerCache:
    """Serve the marker feed from *path*, downloading when needed."""

    def __init__(
        self,
        session: Session,
        path: str | Path,
        lookup: CountryLookup,
        *,
        user_agent: str = "curl/7.43.0",
    ) -> None:
        self._session = session
        self.path = Path(path)
        self._lookup = lookup
        self._user_agent = user_agent

    async def load(self, force_refresh: bool = False) -> list[MarkerFeedEntry]:
        if not force_refresh:
            try:
                return await self.read()
            except CacheMiss as e:
                logger.warning("Marker cache unusable, downloading: %s", e)
        return await self.download()

    async def read(self) -> list[MarkerFeedEntry]:
        try:
            raw = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise CacheMiss(f"cannot read {self.path}: {e}") from e
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise CacheMiss(f"malformed cache file {self.path}") from e
        if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
            raise CacheMiss(f"{self.path} does not hold an array of markers")
        entries = [trusted_entry(item) for item in data]
        logger.debug("Loaded %d markers from %s", len(entries), self.path)
        return entries

    async def write(self, entries: list[MarkerFeedEntry]) -> None:
        data = _ENTRIES.dump_json(entries, by_alias=True, exclude_none=True)
        await asyncio.to_thread(self.path.write_bytes, data)
        logger.info("Wrote %d markers to %s", len(entries), self.path)

    async def download(self) -> list[MarkerFeedEntry]:
        logger.info("Downloading marker feed")
        body = await self._session.fetch(
            FEED_PATH,
            headers={"User-Agent": self._user_agent, "Accept": "*/*"},
        )
        entries = await asyncio.to_thread(parse_feed, body, self._lookup)
        await self.write(entries)
        return entries
