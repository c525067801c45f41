"""Record types produced by the furrymap client.

Attribute names are snake_case; the JSON form keeps the site's camelCase keys
through aliases so the marker cache file stays compatible with older dumps.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class _Record(BaseModel, frozen=True, populate_by_name=True):
    """Common config: immutable, constructible by field name or alias."""


class Location(_Record):
    """A point on the map."""

    longitude: float
    latitude: float
    country: str | None = None
    height: float | None = None


class ProfileSummary(_Record):
    """A user as listed in search results and friend lists."""

    id: int
    name: str
    profile_url: str | None = Field(default=None, alias="profileURL")
    avatar_url: str = Field(alias="avatarURL")
    gender: str | None = None
    country: str | None = None
    species: str | None = None
    marker_count: int = Field(alias="markerCount")


class Marker(_Record):
    """A marker parsed from a search result or profile page."""

    id: int | str
    is_home: bool = Field(default=False, alias="isHome")
    user_name: str = Field(alias="userName")
    description: str = ""
    location: Location


class MarkerFeedEntry(_Record):
    """A marker from the combined JSON feed."""

    id: int | str
    user_name: str = Field(alias="userName")
    description: str = ""
    opacity_factor: int = Field(alias="opacityFactor")
    location: Location
    profile_url: str = Field(alias="profileURL")
    profile_image_url: str | None = Field(default=None, alias="profileImageURL")


class About(_Record):
    other_nicknames: str | None = Field(default=None, alias="otherNicknames")
    relationship_status: str | None = Field(default=None, alias="relationshipStatus")
    species: str | None = None


class Phones(_Record):
    mobile: str | None = None
    home: str | None = None


class Contact(_Record):
    real_name: str | None = Field(default=None, alias="realName")
    # Imprecise by up to a year when only the age is published.
    birth_date: date | None = Field(default=None, alias="birthDate")
    location: list[str] | None = None
    phones: Phones = Field(default_factory=Phones)


class FullProfile(_Record):
    """Everything shown on a user's profile page.

    Optional sections are ``None`` when their heading is missing from the page.
    """

    about: About | None = None
    contact: Contact | None = None
    messengers: dict[str, str] | None = None
    websites: dict[str, str] | None = None
    misc_links: list[str] = Field(default_factory=list, alias="miscLinks")
    markers: list[Marker] = Field(default_factory=list)
    friends: list[ProfileSummary] = Field(default_factory=list)


class SearchResult(_Record):
    """Users and markers matching a search."""

    users: list[ProfileSummary] = Field(default_factory=list)
    markers: list[Marker] = Field(default_factory=list)
