"""Page extractors: turn parsed furrymap pages into records."""

from __future__ import annotations

from furrymap.extractors.markers import extract_markers
from furrymap.extractors.profile import extract_full_profile
from furrymap.extractors.summaries import extract_profile_summaries

__all__ = [
    "extract_full_profile",
    "extract_markers",
    "extract_profile_summaries",
]
