"""Full profile pages (``/profile/<name>``)."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime

from bs4 import Tag

from furrymap.dom import (
    attr,
    child_elements,
    first_leaf_text,
    labeled_value,
    section_body,
    text_of,
)
from furrymap.errors import ParseError
from furrymap.extractors.markers import extract_markers
from furrymap.extractors.summaries import extract_profile_summaries
from furrymap.geo import CountryLookup
from furrymap.models import About, Contact, FullProfile, Phones

logger = logging.getLogger(__name__)

_BIRTHDAY_FORMATS = ("%d.%m.%Y", "%Y-%m-%d", "%m/%d/%Y", "%d %B %Y", "%B %d, %Y")
_AGE_RE = re.compile(r"\d+")
_LABEL_SUFFIX_RE = re.compile(r":\s*$")


def content_region(doc: Tag) -> Tag:
    region = doc.find(id="middle_content")
    if region is None:
        raise ParseError("profile page has no #middle_content region")
    return region


# ---------------------------------------------------------------------------
# Birth date
# ---------------------------------------------------------------------------


def parse_birthday(text: str) -> date:
    for fmt in _BIRTHDAY_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ParseError(f"unrecognised birthday: {text!r}")


def birth_date_from_age(age: int, today: date) -> date:
    """Subtract *age* years from *today*, keeping month and day."""
    try:
        return today.replace(year=today.year - age)
    except ValueError:
        # 29 February in a non-leap target year
        return today.replace(year=today.year - age, day=28)


def resolve_birth_date(
    birthday: str | None, age_text: str | None, today: date
) -> date | None:
    if birthday:
        return parse_birthday(birthday)
    if age_text:
        m = _AGE_RE.search(age_text)
        if m and int(m.group()):
            return birth_date_from_age(int(m.group()), today)
    return None


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def parse_about(body: Tag) -> About:
    return About(
        other_nicknames=labeled_value(body, "Other nicknames"),
        relationship_status=labeled_value(body, "Relationship status"),
        species=labeled_value(body, "Furry species"),
    )


def parse_location(body: Tag) -> list[str] | None:
    text = first_leaf_text(body)
    if not text:
        return None
    return [part.strip() for part in text.split(",")]


def parse_contact(body: Tag, today: date) -> Contact:
    return Contact(
        real_name=labeled_value(body, "Realname"),
        birth_date=resolve_birth_date(
            labeled_value(body, "Birthday"), labeled_value(body, "Age"), today
        ),
        location=parse_location(body),
        phones=Phones(
            mobile=labeled_value(body, "Cell number"),
            home=labeled_value(body, "Home number"),
        ),
    )


def parse_links(body: Tag, *, use_text: bool) -> tuple[dict[str, str], list[str]]:
    """Collect ``label -> value`` rows of a messenger or website section.

    The value is the link text when *use_text* is set, else the link target.
    Rows whose value already contains the label go to the second list.
    """
    links: dict[str, str] = {}
    misc: list[str] = []
    for row in child_elements(body, "div"):
        anchor = row.find("a")
        if anchor is None:
            continue
        value = text_of(anchor) if use_text else attr(anchor, "href")
        if not value:
            continue
        key = _LABEL_SUFFIX_RE.sub("", text_of(row.find("b"))).lower()
        if key in value:
            misc.append(value)
            continue
        links[key] = value
    return links, misc


def extract_full_profile(
    doc: Tag,
    lookup: CountryLookup,
    *,
    today: date | None = None,
) -> FullProfile:
    """Parse a profile page, including its marker and friend lists."""
    region = content_region(doc)
    today = today or date.today()

    about_body = section_body(region, "About")
    contact_body = section_body(region, "Reallife")
    messenger_body = section_body(region, "Messenger")
    website_body = section_body(region, "Websites")

    misc_links: list[str] = []
    messengers = websites = None
    if messenger_body is not None:
        messengers, misc = parse_links(messenger_body, use_text=True)
        misc_links.extend(misc)
    if website_body is not None:
        websites, misc = parse_links(website_body, use_text=False)
        misc_links.extend(misc)

    profile = FullProfile(
        about=parse_about(about_body) if about_body is not None else None,
        contact=parse_contact(contact_body, today) if contact_body is not None else None,
        messengers=messengers,
        websites=websites,
        misc_links=misc_links,
        markers=extract_markers(doc, lookup),
        friends=extract_profile_summaries(doc),
    )
    logger.debug(
        "Parsed profile: %d markers, %d friends",
        len(profile.markers),
        len(profile.friends),
    )
    return profile
