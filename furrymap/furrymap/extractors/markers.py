"""Markers listed on search result and profile pages."""

from __future__ import annotations

import logging
import re
from urllib.parse import parse_qs, urlparse

from bs4 import Tag

from furrymap.dom import attr, child_elements, match_id, pure_text, text_of
from furrymap.errors import ParseError
from furrymap.geo import CountryLookup
from furrymap.models import Location, Marker

logger = logging.getLogger(__name__)

_MARKER_ID_RE = re.compile(r"^marker_(\d+)$", re.IGNORECASE)
_DESCRIPTION_PREFIX_RE = re.compile(r"^:\s*")
_HOME_ICON = "/images/home.png"


def marker_containers(doc: Tag) -> list[Tag]:
    root = doc.find(id="markersitems")
    if root is None:
        return []
    return child_elements(root, "div")


def map_link_query(inner: Tag) -> dict[str, list[str]]:
    href = attr(inner.select_one("small > a"), "href")
    if not href:
        raise ParseError("marker has no map link")
    return parse_qs(urlparse(href).query)


def parse_coordinates(query: dict[str, list[str]]) -> tuple[float, float]:
    """Return ``(longitude, latitude)`` from the ``daddr`` parameter.

    The site writes ``daddr`` as ``lat,long``.
    """
    daddr = query.get("daddr", [""])[0]
    parts = daddr.split(",")
    try:
        latitude, longitude = float(parts[0]), float(parts[1])
    except (IndexError, ValueError):
        raise ParseError(f"malformed map destination: {daddr!r}") from None
    return longitude, latitude


def parse_height(query: dict[str, list[str]]) -> float | None:
    values = query.get("z")
    if not values:
        return None
    try:
        return float(values[0])
    except ValueError:
        return None


def is_home(inner: Tag) -> bool:
    return any(attr(img, "src") == _HOME_ICON for img in inner.select("small > img"))


def parse_marker(container: Tag, lookup: CountryLookup) -> Marker:
    marker_id = match_id(container, _MARKER_ID_RE).group(1)
    inner = container.find("div")
    if inner is None:
        raise ParseError(f"marker {marker_id} has no content block")

    query = map_link_query(inner)
    longitude, latitude = parse_coordinates(query)
    description = _DESCRIPTION_PREFIX_RE.sub("", pure_text(inner.find("b")))

    return Marker(
        id=marker_id,
        is_home=is_home(inner),
        user_name=text_of(inner.select_one("b > a")),
        description=description,
        location=Location(
            longitude=longitude,
            latitude=latitude,
            country=lookup.lookup(longitude, latitude),
            height=parse_height(query),
        ),
    )


def extract_markers(doc: Tag, lookup: CountryLookup) -> list[Marker]:
    markers = [parse_marker(container, lookup) for container in marker_containers(doc)]
    logger.debug("Extracted %d markers", len(markers))
    return markers
