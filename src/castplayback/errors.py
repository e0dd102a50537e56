"""Exception types raised by castplayback."""

from __future__ import annotations


class CastPlaybackError(Exception):
    """Base class for all castplayback errors."""


class CastError(CastPlaybackError):
    """A request to the cast receiver was rejected or failed."""


class TransientNetworkDisconnectionError(CastPlaybackError):
    """The cast session is temporarily unreachable."""


class NoConnectionError(CastPlaybackError):
    """No cast session is established."""


class InvalidMediaIdError(CastPlaybackError, ValueError):
    """A media identifier is missing or unknown to the catalog."""


class PayloadEncodingError(CastPlaybackError):
    """Custom data attached to a load request could not be encoded."""


class CatalogError(CastPlaybackError):
    """A catalog could not be fetched or parsed."""


__all__ = [
    "CastError",
    "CastPlaybackError",
    "CatalogError",
    "InvalidMediaIdError",
    "NoConnectionError",
    "PayloadEncodingError",
    "TransientNetworkDisconnectionError",
]
