"""Profile summaries from search listings and friend lists."""

from __future__ import annotations

import re

from bs4 import Tag

from furrymap.dom import (
    adjacent_after,
    attr,
    child_elements,
    elements_with_id,
    last_child_of_type,
    match_id,
    pure_text,
    text_of,
)
from furrymap.errors import ParseError
from furrymap.models import ProfileSummary

_LISTING_ID_RE = re.compile(r"^userlocation_")
_USER_LINK_ID_RE = re.compile(r"^user_(\d+)$", re.IGNORECASE)
_SPECIES_MARKERS_RE = re.compile(r"^(?:(.*?),)?\s*(\d+) markers?$", re.IGNORECASE)


def listing_containers(doc: Tag) -> list[Tag]:
    """The entry ``div`` elements directly inside each ``userlocation_*`` block."""
    containers: list[Tag] = []
    for block in elements_with_id(doc, "div", _LISTING_ID_RE):
        containers.extend(child_elements(block, "div"))
    return containers


def user_link(container: Tag) -> Tag:
    link = container.find("a", id=_USER_LINK_ID_RE)
    if link is None:
        raise ParseError("listing has no user_<id> link")
    return link


def parse_species_and_markers(text: str) -> tuple[str | None, int]:
    """Split ``"<species>, <N> markers"`` or ``"<N> markers"``."""
    m = _SPECIES_MARKERS_RE.match(text)
    if m is None:
        raise ParseError(f"unexpected species/marker text: {text!r}")
    species = m.group(1).strip() if m.group(1) else None
    return species or None, int(m.group(2))


def parse_listing(container: Tag) -> ProfileSummary:
    link = user_link(container)
    user_id = int(match_id(link, _USER_LINK_ID_RE).group(1))
    species, marker_count = parse_species_and_markers(
        pure_text(last_child_of_type(container, "small"))
    )
    return ProfileSummary(
        id=user_id,
        name=text_of(link),
        profile_url=attr(container.find("a"), "href"),
        avatar_url=f"/images/avatar/{user_id}.png",
        gender=attr(adjacent_after(container, "img", "a"), "alt"),
        country=attr(container.select_one("small > span > img"), "title"),
        species=species,
        marker_count=marker_count,
    )


def extract_profile_summaries(doc: Tag) -> list[ProfileSummary]:
    return [parse_listing(container) for container in listing_containers(doc)]
