"""furrymap: async client for furrymap.net profiles, searches and markers."""

from furrymap.client import FurryMap
from furrymap.config import Config, Credentials
from furrymap.errors import AuthError, CacheMiss, FurryMapError, ParseError
from furrymap.models import (
    About,
    Contact,
    FullProfile,
    Location,
    Marker,
    MarkerFeedEntry,
    Phones,
    ProfileSummary,
    SearchResult,
)

__all__ = [
    "About",
    "AuthError",
    "CacheMiss",
    "Config",
    "Contact",
    "Credentials",
    "FullProfile",
    "FurryMap",
    "FurryMapError",
    "Location",
    "Marker",
    "MarkerFeedEntry",
    "ParseError",
    "Phones",
    "ProfileSummary",
    "SearchResult",
]
