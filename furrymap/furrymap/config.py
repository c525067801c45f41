"""Configuration for the furrymap client."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Credentials:
    """Login credentials for a furrymap account."""

    username: str
    password: str


@dataclass(frozen=True)
class Config:
    """Client configuration, optionally populated from environment variables."""

    cache_name: str = "furrymapCache.json"
    credentials: Credentials | None = None
    base_url: str = "https://furrymap.net"
    http_timeout: float = 30.0
    # The marker feed rejects browser-like and default client identifiers.
    feed_user_agent: str = "curl/7.43.0"

    @classmethod
    def from_env(cls) -> Config:
        username = os.getenv("FURRYMAP_USERNAME")
        password = os.getenv("FURRYMAP_PASSWORD")
        credentials = (
            Credentials(username=username, password=password)
            if username and password
            else None
        )
        return cls(
            cache_name=os.getenv("FURRYMAP_CACHE", cls.cache_name),
            credentials=credentials,
            base_url=os.getenv("FURRYMAP_BASE_URL", cls.base_url),
            http_timeout=float(os.getenv("FURRYMAP_TIMEOUT", "30")),
        )
