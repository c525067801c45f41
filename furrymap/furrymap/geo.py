"""Coordinate to country lookup."""

from __future__ import annotations

import math
from typing import Protocol


class CountryLookup(Protocol):
    def lookup(self, longitude: float, latitude: float) -> str | None:
        """Return the country name containing the point, or ``None``."""
        ...


class ReverseGeocodeLookup:
    """Offline lookup backed by the ``reverse_geocode`` city dataset.

    The point is attributed to the country of its nearest known city.
    """

    def lookup(self, longitude: float, latitude: float) -> str | None:
        if not (math.isfinite(longitude) and math.isfinite(latitude)):
            return None

        import reverse_geocode

        place = reverse_geocode.search([(latitude, longitude)])[0]
        return place.get("country") or None
