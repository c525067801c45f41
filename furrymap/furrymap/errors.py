"""Exception types raised by the furrymap client."""

from __future__ import annotations


class FurryMapError(Exception):
    """Base class for all furrymap errors."""


class AuthError(FurryMapError):
    """The login form came back with an error list."""


class ParseError(FurryMapError):
    """Expected markup or text was absent or did not match its pattern."""


class CacheMiss(FurryMapError):
    """The marker cache file is absent, unreadable or malformed."""
