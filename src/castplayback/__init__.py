"""castplayback public API.

This module re-exports the playback backend that renders a host music
player's queue on a cast receiver, together with its data types and the
catalog helpers it depends on.
"""

from __future__ import annotations

import castplayback.cast_playback as _cast_playback
import castplayback.catalog as _catalog
import castplayback.errors as _errors
import castplayback.types as _types

# Re-export the playback backend
CastPlayback = _cast_playback.CastPlayback
to_cast_media_metadata = _cast_playback.to_cast_media_metadata

# Re-export catalogs
JsonCatalogSource = _catalog.JsonCatalogSource
MemoryCatalog = _catalog.MemoryCatalog

# Re-export types for public API
Catalog = _types.Catalog
IdleReason = _types.IdleReason
MediaID = _types.MediaID
MusicID = _types.MusicID
Playback = _types.Playback
PlaybackCallback = _types.PlaybackCallback
PlaybackSession = _types.PlaybackSession
PlaybackState = _types.PlaybackState
QueueItem = _types.QueueItem
RemoteMediaClient = _types.RemoteMediaClient
RemoteMediaInfo = _types.RemoteMediaInfo
RemoteMediaObserver = _types.RemoteMediaObserver
RemotePlayerState = _types.RemotePlayerState
TrackDescriptor = _types.TrackDescriptor

# Re-export errors
CastError = _errors.CastError
CastPlaybackError = _errors.CastPlaybackError
CatalogError = _errors.CatalogError
InvalidMediaIdError = _errors.InvalidMediaIdError
NoConnectionError = _errors.NoConnectionError
PayloadEncodingError = _errors.PayloadEncodingError
TransientNetworkDisconnectionError = _errors.TransientNetworkDisconnectionError

__all__ = [
    "CastError",
    "CastPlayback",
    "CastPlaybackError",
    "Catalog",
    "CatalogError",
    "IdleReason",
    "InvalidMediaIdError",
    "JsonCatalogSource",
    "MediaID",
    "MemoryCatalog",
    "MusicID",
    "NoConnectionError",
    "PayloadEncodingError",
    "Playback",
    "PlaybackCallback",
    "PlaybackSession",
    "PlaybackState",
    "QueueItem",
    "RemoteMediaClient",
    "RemoteMediaInfo",
    "RemoteMediaObserver",
    "RemotePlayerState",
    "TrackDescriptor",
    "TransientNetworkDisconnectionError",
    "to_cast_media_metadata",
]
