"""Cast playback backend.

This module implements a Playback that renders media on a remote cast
receiver through an injected RemoteMediaClient.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Mapping
from typing import Any

import castplayback.errors as _errors
import castplayback.media_id as _media_id
import castplayback.types as _types

_LOGGER = logging.getLogger(__name__)

MIME_TYPE_AUDIO_MPEG = "audio/mpeg"
ITEM_ID = "itemId"
METADATA_TYPE_MUSIC_TRACK = 3
STREAM_TYPE_BUFFERED = "BUFFERED"

# Errors converted to host error callbacks by load paths.
_LOAD_ERRORS = (
    _errors.CastError,
    _errors.TransientNetworkDisconnectionError,
    _errors.NoConnectionError,
    _errors.PayloadEncodingError,
    _errors.InvalidMediaIdError,
)
_CONNECTIVITY_ERRORS = (
    _errors.TransientNetworkDisconnectionError,
    _errors.NoConnectionError,
)
_REMOTE_STATES = {
    _types.RemotePlayerState.BUFFERING: _types.PlaybackState.BUFFERING,
    _types.RemotePlayerState.PLAYING: _types.PlaybackState.PLAYING,
    _types.RemotePlayerState.PAUSED: _types.PlaybackState.PAUSED,
}


def to_cast_media_metadata(
    track: _types.TrackDescriptor, custom_data: Mapping[str, Any]
) -> _types.RemoteMediaInfo:
    """Convert a catalog track into the descriptor sent to the receiver.

    :param track: Track to describe.
    :param custom_data: Application data identifying the local media id.
    :returns: RemoteMediaInfo for a buffered audio stream.
    :raises PayloadEncodingError: If custom_data is not JSON-serializable.
    """
    try:
        payload: dict[str, Any] = json.loads(json.dumps(custom_data))
    except (TypeError, ValueError) as e:
        raise _errors.PayloadEncodingError(f"Unable to encode custom data: {e}") from e

    metadata: dict[str, Any] = {
        "metadataType": METADATA_TYPE_MUSIC_TRACK,
        "title": track.title or "",
        "subtitle": track.subtitle or "",
        "albumArtist": track.album_artist,
        "albumName": track.album,
        "images": [],
    }
    if track.art_uri:
        image = {"url": track.art_uri}
        # The receiver shows the first image as album art; senders use the
        # second one for their expanded controls.
        metadata["images"] = [image, dict(image)]

    return _types.RemoteMediaInfo(
        content_id=track.source,
        content_type=MIME_TYPE_AUDIO_MPEG,
        stream_type=STREAM_TYPE_BUFFERED,
        metadata=metadata,
        custom_data=payload,
    )


class CastPlayback(_types.Playback, _types.RemoteMediaObserver):
    """Playback implementation that talks to a cast receiver."""

    def __init__(
        self, client: _types.RemoteMediaClient, catalog: _types.Catalog
    ) -> None:
        """Initialize the backend.

        :param client: Remote rendering client for the receiver session.
        :param catalog: Catalog used to resolve media ids to tracks.
        """
        self._client = client
        self._catalog = catalog
        self._callback: _types.PlaybackCallback | None = None
        self._session = _types.PlaybackSession()
        # Guards the session only; never held across client calls or callbacks.
        self._lock = threading.Lock()

    @property
    def session(self) -> _types.PlaybackSession:
        """Snapshot of the current session state."""
        with self._lock:
            return _types.PlaybackSession(
                state=self._session.state,
                media_id=self._session.media_id,
                position=self._session.position,
            )

    def start(self) -> None:
        """Subscribe to receiver notifications.

        :returns: None
        """
        self._client.add_observer(self)

    def stop(self, notify: bool) -> None:
        """Unsubscribe from receiver notifications and mark playback stopped.

        :param notify: Inform the host callback of the state change.
        :returns: None
        """
        self._client.remove_observer(self)
        with self._lock:
            self._session.state = _types.PlaybackState.STOPPED
        if notify:
            self._notify_state(_types.PlaybackState.STOPPED)

    def set_state(self, state: _types.PlaybackState) -> None:
        with self._lock:
            self._session.state = state

    def get_state(self) -> _types.PlaybackState:
        with self._lock:
            return self._session.state

    def get_current_stream_position(self) -> int:
        """Return the playback position in milliseconds.

        :returns: Cached position while disconnected, the live position when
            connected, or -1 when the live query fails.
        """
        if not self._client.is_connected():
            with self._lock:
                return self._session.position
        try:
            return self._client.get_current_media_position()
        except _CONNECTIVITY_ERRORS:
            _LOGGER.exception("Exception getting media position")
        return -1

    def set_current_stream_position(self, position: int) -> None:
        with self._lock:
            self._session.position = position

    def update_last_known_stream_position(self) -> None:
        """Snapshot the live position into the cached value.

        :returns: None
        """
        position = self.get_current_stream_position()
        with self._lock:
            self._session.position = position

    def play(self, item: _types.QueueItem) -> None:
        """Load a queue item on the receiver and start playing it.

        :param item: Queue item to play.
        :returns: None
        """
        try:
            self._load_media(item.media_id, autoplay=True)
        except _LOAD_ERRORS as e:
            _LOGGER.error("Exception loading media: %s", e)
            self._report_error(e)
            return
        with self._lock:
            self._session.state = _types.PlaybackState.BUFFERING
        self._notify_state(_types.PlaybackState.BUFFERING)

    def pause(self) -> None:
        """Pause the receiver, or reload the current media paused.

        :returns: None
        """
        with self._lock:
            media_id = self._session.media_id
        try:
            if self._client.is_remote_media_loaded():
                self._client.pause()
                position = self._client.get_current_media_position()
                with self._lock:
                    self._session.position = position
            else:
                self._load_media(media_id, autoplay=False)
        except _LOAD_ERRORS as e:
            _LOGGER.exception("Exception pausing cast playback")
            self._report_error(e)

    def seek_to(self, position: int) -> None:
        """Seek the current media.

        :param position: Target position in milliseconds.
        :returns: None
        """
        with self._lock:
            media_id = self._session.media_id
        if media_id is None:
            self._report_error(
                _errors.InvalidMediaIdError(
                    "seek_to cannot be called without a current media id."
                )
            )
            return
        try:
            if self._client.is_remote_media_loaded():
                self._client.seek(position)
                with self._lock:
                    self._session.position = position
            else:
                # Loads of the current media id start at the cached position.
                with self._lock:
                    self._session.position = position
                self._load_media(media_id, autoplay=False)
        except _LOAD_ERRORS as e:
            _LOGGER.exception("Exception seeking cast playback")
            self._report_error(e)

    def set_current_media_id(self, media_id: _types.MediaID | None) -> None:
        with self._lock:
            self._session.media_id = media_id

    def get_current_media_id(self) -> _types.MediaID | None:
        with self._lock:
            return self._session.media_id

    def set_callback(self, callback: _types.PlaybackCallback | None) -> None:
        self._callback = callback

    def is_connected(self) -> bool:
        return self._client.is_connected()

    def is_playing(self) -> bool:
        """Return True when the receiver is connected and playing.

        :returns: False on connectivity errors.
        """
        try:
            return self._client.is_connected() and self._client.is_remote_media_playing()
        except _CONNECTIVITY_ERRORS:
            _LOGGER.exception("Exception calling is_remote_media_playing")
        return False

    def on_remote_metadata_updated(self) -> None:
        _LOGGER.debug("on_remote_metadata_updated")
        self._set_metadata_from_remote()

    def on_remote_status_updated(self) -> None:
        _LOGGER.debug("on_remote_status_updated")
        self._update_playback_state()

    def _report_error(self, error: Exception) -> None:
        callback = self._callback
        if callback is not None:
            callback.on_error(str(error))

    def _notify_state(self, state: _types.PlaybackState) -> None:
        callback = self._callback
        if callback is not None:
            callback.on_playback_status_changed(state)

    def _load_media(self, media_id: _types.MediaID | None, autoplay: bool) -> None:
        """Resolve a media id and issue a load request to the receiver.

        The session adopts the media id and start position only once the
        request has been accepted by the client.

        :param media_id: Media id to load.
        :param autoplay: Start playing once loaded.
        :raises InvalidMediaIdError: If the id is missing or unknown.
        """
        track = None
        if media_id is not None and not _media_id.is_browseable(media_id):
            track = self._catalog.get_music(_media_id.extract_music_id(media_id))
        if track is None:
            raise _errors.InvalidMediaIdError(f"Invalid mediaId {media_id}")
        with self._lock:
            position = self._session.position if media_id == self._session.media_id else 0
        custom_data = {ITEM_ID: media_id}
        media = to_cast_media_metadata(track, custom_data)
        self._client.load_media(media, autoplay, position, custom_data)
        with self._lock:
            self._session.media_id = media_id
            self._session.position = position

    def _set_metadata_from_remote(self) -> None:
        # The receiver may be playing something else when the app reconnects
        # or joins an existing session; adopt its media id.
        try:
            media_info = self._client.get_remote_media_information()
        except _CONNECTIVITY_ERRORS:
            _LOGGER.exception("Exception processing update metadata")
            return
        if media_info is None or not media_info.custom_data:
            return
        remote_media_id = media_info.custom_data.get(ITEM_ID)
        if remote_media_id is None:
            return
        remote_media_id = _types.MediaID(str(remote_media_id))
        with self._lock:
            if remote_media_id == self._session.media_id:
                return
            self._session.media_id = remote_media_id
        callback = self._callback
        if callback is not None:
            callback.set_current_media_id(remote_media_id)
        self.update_last_known_stream_position()

    def _update_playback_state(self) -> None:
        status = self._client.get_playback_status()
        idle_reason = self._client.get_idle_reason()

        _LOGGER.debug("Remote player status: %s", status.value)

        if status is _types.RemotePlayerState.IDLE:
            callback = self._callback
            if idle_reason is _types.IdleReason.FINISHED and callback is not None:
                callback.on_completion()
            return

        state = _REMOTE_STATES.get(status)
        if state is None:
            _LOGGER.debug("Ignoring remote player status %s", status.value)
            return
        with self._lock:
            self._session.state = state
        if state is not _types.PlaybackState.BUFFERING:
            self._set_metadata_from_remote()
        self._notify_state(state)


__all__ = ["ITEM_ID", "MIME_TYPE_AUDIO_MPEG", "CastPlayback", "to_cast_media_metadata"]
