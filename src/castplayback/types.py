"""Common data types and interfaces for castplayback.

This module contains the core data structures and the abstract seams
(playback, host callback, remote client, catalog) used throughout the
library to avoid circular import issues.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, NewType, cast

# Hierarchical identifier used by the host ("category/sub|musicId").
MediaID = NewType("MediaID", str)

# Leaf identifier of a track inside the catalog.
MusicID = NewType("MusicID", str)


class PlaybackState(enum.IntEnum):
    """Local logical playback state reported to the host."""

    NONE = 0
    STOPPED = 1
    PAUSED = 2
    PLAYING = 3
    BUFFERING = 6
    ERROR = 7


class RemotePlayerState(str, enum.Enum):
    """Player state reported by a cast receiver."""

    IDLE = "IDLE"
    BUFFERING = "BUFFERING"
    PLAYING = "PLAYING"
    PAUSED = "PAUSED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> RemotePlayerState:
        """Convert a receiver state string, defaulting to UNKNOWN.

        :param value: State string from the receiver, or None.
        :returns: Matching RemotePlayerState.
        """
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class IdleReason(str, enum.Enum):
    """Reason reported by a receiver for entering the IDLE state."""

    NONE = "NONE"
    FINISHED = "FINISHED"
    CANCELLED = "CANCELLED"
    INTERRUPTED = "INTERRUPTED"
    ERROR = "ERROR"

    @classmethod
    def parse(cls, value: str | None) -> IdleReason:
        """Convert a receiver idle reason string, defaulting to NONE.

        :param value: Idle reason string from the receiver, or None.
        :returns: Matching IdleReason.
        """
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


@dataclass(frozen=True)
class TrackDescriptor:
    """Descriptive metadata of a catalog track.

    :param music_id: Catalog identifier of the track.
    :param source: Playable content URI.
    :param title: Track title.
    :param subtitle: Display subtitle (usually the artist).
    :param album: Album title.
    :param artist: Track artist.
    :param album_artist: Album artist.
    :param genre: Genre name.
    :param art_uri: Album art URI.
    :param duration_ms: Duration in milliseconds.
    :param track_number: Position of the track in its album.
    :param total_track_count: Number of tracks in the album.
    """

    music_id: MusicID
    source: str
    title: str | None = None
    subtitle: str | None = None
    album: str | None = None
    artist: str | None = None
    album_artist: str | None = None
    genre: str | None = None
    art_uri: str | None = None
    duration_ms: int | None = None
    track_number: int | None = None
    total_track_count: int | None = None


@dataclass(frozen=True)
class QueueItem:
    """An entry of the host play queue.

    :param media_id: Hierarchical media identifier of the entry.
    :param queue_id: Optional position identifier inside the queue.
    """

    media_id: MediaID
    queue_id: int | None = None


@dataclass
class RemoteMediaInfo:
    """Media descriptor as sent to, or reported by, a cast receiver.

    :param content_id: Content URI the receiver loads.
    :param content_type: MIME type of the content.
    :param stream_type: Cast stream type ("BUFFERED", "LIVE").
    :param metadata: Metadata in the cast wire shape.
    :param custom_data: Opaque application data echoed back by the receiver.
    """

    content_id: str
    content_type: str | None = None
    stream_type: str = "BUFFERED"
    metadata: dict[str, Any] = field(default_factory=lambda: cast(dict[str, Any], {}))
    custom_data: Mapping[str, Any] | None = None


@dataclass
class PlaybackSession:
    """Mutable session state tracked by a playback backend.

    :param state: Current logical state.
    :param media_id: Identifier the backend considers authoritative.
    :param position: Last known position in milliseconds.
    """

    state: PlaybackState = PlaybackState.NONE
    media_id: MediaID | None = None
    position: int = 0


class PlaybackCallback(ABC):
    """Host sink notified by a playback backend."""

    @abstractmethod
    def on_completion(self) -> None:
        """Handle the current track finishing on its own.

        :returns: None
        """
        ...

    @abstractmethod
    def on_playback_status_changed(self, state: PlaybackState) -> None:
        """Handle a change of the logical playback state.

        :param state: The new state.
        :returns: None
        """
        ...

    @abstractmethod
    def on_error(self, message: str) -> None:
        """Handle a failed playback operation.

        :param message: Human-readable error message.
        :returns: None
        """
        ...

    @abstractmethod
    def set_current_media_id(self, media_id: MediaID) -> None:
        """Adopt a media identifier reported by the backend.

        :param media_id: The identifier now playing.
        :returns: None
        """
        ...


class RemoteMediaObserver(ABC):
    """Observer of notifications delivered by a remote rendering client."""

    @abstractmethod
    def on_remote_metadata_updated(self) -> None:
        """Handle a change of the media loaded on the receiver.

        :returns: None
        """
        ...

    @abstractmethod
    def on_remote_status_updated(self) -> None:
        """Handle a change of the receiver player status.

        :returns: None
        """
        ...


class RemoteMediaClient(ABC):
    """Client managing a session with a remote rendering device.

    Query and control methods raise NoConnectionError when no session is
    established and TransientNetworkDisconnectionError when the session is
    temporarily unreachable.
    """

    @abstractmethod
    def connect(self, timeout: float | None = None) -> None:
        """Establish the session with the device.

        :param timeout: Optional connection timeout in seconds.
        :returns: None
        """
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Tear down the session with the device.

        :returns: None
        """
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        """Return True when a session is established."""
        ...

    @abstractmethod
    def load_media(
        self,
        media: RemoteMediaInfo,
        autoplay: bool,
        position: int,
        custom_data: Mapping[str, Any] | None = None,
    ) -> None:
        """Load media on the receiver.

        :param media: Descriptor of the media to load.
        :param autoplay: Start playing once loaded.
        :param position: Start position in milliseconds.
        :param custom_data: Optional application data for the load request.
        :returns: None
        """
        ...

    @abstractmethod
    def pause(self) -> None:
        """Pause the media loaded on the receiver.

        :returns: None
        """
        ...

    @abstractmethod
    def seek(self, position: int) -> None:
        """Seek the loaded media.

        :param position: Target position in milliseconds.
        :returns: None
        """
        ...

    @abstractmethod
    def get_current_media_position(self) -> int:
        """Return the live playback position in milliseconds."""
        ...

    @abstractmethod
    def get_playback_status(self) -> RemotePlayerState:
        """Return the receiver player state."""
        ...

    @abstractmethod
    def get_idle_reason(self) -> IdleReason:
        """Return the reason for the last IDLE state."""
        ...

    @abstractmethod
    def get_remote_media_information(self) -> RemoteMediaInfo | None:
        """Return the media loaded on the receiver, if any."""
        ...

    @abstractmethod
    def is_remote_media_loaded(self) -> bool:
        """Return True when the receiver has media loaded."""
        ...

    @abstractmethod
    def is_remote_media_playing(self) -> bool:
        """Return True when the receiver is playing or buffering."""
        ...

    @abstractmethod
    def add_observer(self, observer: RemoteMediaObserver) -> None:
        """Subscribe an observer to status and metadata notifications.

        :param observer: Observer to add.
        :returns: None
        """
        ...

    @abstractmethod
    def remove_observer(self, observer: RemoteMediaObserver) -> None:
        """Unsubscribe a previously added observer.

        :param observer: Observer to remove.
        :returns: None
        """
        ...


class Catalog(ABC):
    """Lookup service resolving music identifiers to track metadata."""

    @abstractmethod
    def get_music(self, music_id: str) -> TrackDescriptor | None:
        """Return the track for an identifier, or None when unknown.

        :param music_id: Catalog identifier of the track.
        :returns: TrackDescriptor or None.
        """
        ...


class Playback(ABC):
    """Control surface a host uses to drive one playback backend."""

    @abstractmethod
    def start(self) -> None:
        """Begin receiving backend notifications."""
        ...

    @abstractmethod
    def stop(self, notify: bool) -> None:
        """Stop the backend, optionally notifying the host."""
        ...

    @abstractmethod
    def set_state(self, state: PlaybackState) -> None:
        """Set the locally tracked state."""
        ...

    @abstractmethod
    def get_state(self) -> PlaybackState:
        """Return the locally tracked state."""
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        """Return True when the backend is connected."""
        ...

    @abstractmethod
    def is_playing(self) -> bool:
        """Return True when the backend is playing."""
        ...

    @abstractmethod
    def get_current_stream_position(self) -> int:
        """Return the playback position in milliseconds."""
        ...

    @abstractmethod
    def set_current_stream_position(self, position: int) -> None:
        """Set the cached playback position."""
        ...

    @abstractmethod
    def update_last_known_stream_position(self) -> None:
        """Snapshot the live position into the cached value."""
        ...

    @abstractmethod
    def play(self, item: QueueItem) -> None:
        """Start playing a queue item."""
        ...

    @abstractmethod
    def pause(self) -> None:
        """Pause playback."""
        ...

    @abstractmethod
    def seek_to(self, position: int) -> None:
        """Seek to a position in milliseconds."""
        ...

    @abstractmethod
    def set_callback(self, callback: PlaybackCallback | None) -> None:
        """Register the host callback sink."""
        ...

    @abstractmethod
    def set_current_media_id(self, media_id: MediaID | None) -> None:
        """Set the authoritative media identifier."""
        ...

    @abstractmethod
    def get_current_media_id(self) -> MediaID | None:
        """Return the authoritative media identifier."""
        ...


__all__ = [
    "Catalog",
    "IdleReason",
    "MediaID",
    "MusicID",
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
]
