"""Chromecast remote media client for castplayback.

This module implements the RemoteMediaClient seam using the pychromecast
library.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any, TypeVar, cast

import pychromecast  # type: ignore
from pychromecast.error import (  # type: ignore
    NotConnected,
    PyChromecastError,
    PyChromecastStopped,
    RequestTimeout,
)

import castplayback.errors as _errors
import castplayback.types as _types

_LOGGER = logging.getLogger(__name__)

_T = TypeVar("_T")


def _to_seconds(position: int) -> float:
    return position / 1000.0


def _to_millis(seconds: float | None) -> int:
    return int((seconds or 0.0) * 1000)


class ChromecastClient(_types.RemoteMediaClient):
    """RemoteMediaClient driving the default media receiver of a Chromecast."""

    def __init__(self, cast_device: Any, browser: Any | None = None) -> None:
        """Initialize the client.

        :param cast_device: The pychromecast Chromecast object.
        :param browser: Optional discovery browser to stop on disconnect.
        """
        self._cast = cast_device
        self._browser = browser
        self._media_controller: Any = cast_device.media_controller
        self._observers: list[_types.RemoteMediaObserver] = []
        self._lock = threading.Lock()
        self._listening = False
        self._last_content_id: str | None = None
        self._last_custom_data: dict[str, Any] | None = None

    @classmethod
    def discover(cls, name: str, *, timeout: float = 15.0) -> ChromecastClient:
        """Discover a Chromecast by friendly name.

        :param name: Friendly name of the device.
        :param timeout: Discovery timeout in seconds.
        :returns: A client for the device (not yet connected).
        :raises NoConnectionError: If no device with that name was found.
        """
        _LOGGER.info("Discovering Chromecast %r", name)
        chromecasts, browser = cast(Any, pychromecast).get_listed_chromecasts(
            friendly_names=[name], discovery_timeout=timeout
        )
        if not chromecasts:
            browser.stop_discovery()
            raise _errors.NoConnectionError(f"No Chromecast named {name!r} was found")
        return cls(chromecasts[0], browser)

    @property
    def name(self) -> str:
        """Friendly name of the device."""
        return str(self._cast.name)

    def connect(self, timeout: float | None = None) -> None:
        """Connect to the device and subscribe to media status.

        :param timeout: Optional connection timeout in seconds.
        :returns: None
        :raises NoConnectionError: If the device does not become ready.
        """
        _LOGGER.info("Connecting to Chromecast %s", self.name)
        try:
            self._cast.wait(timeout=timeout)
        except RequestTimeout as e:
            raise _errors.NoConnectionError(f"Timed out connecting to {self.name}") from e
        if not self._listening:
            self._media_controller.register_status_listener(self)
            self._listening = True

    def disconnect(self) -> None:
        """Disconnect from the device and stop discovery.

        :returns: None
        """
        _LOGGER.info("Disconnecting from Chromecast %s", self.name)
        self._cast.disconnect()
        if self._browser is not None:
            self._browser.stop_discovery()
            self._browser = None

    def is_connected(self) -> bool:
        return bool(self._cast.socket_client.is_connected)

    def load_media(
        self,
        media: _types.RemoteMediaInfo,
        autoplay: bool,
        position: int,
        custom_data: Mapping[str, Any] | None = None,
    ) -> None:
        """Load media on the default media receiver.

        :param media: Descriptor of the media to load.
        :param autoplay: Start playing once loaded.
        :param position: Start position in milliseconds.
        :param custom_data: Optional application data for the load request.
        :returns: None
        """
        data = custom_data if custom_data is not None else media.custom_data
        media_info: dict[str, Any] = {}
        if data is not None:
            media_info["customData"] = dict(data)
        _LOGGER.debug(
            "Loading %s at %dms (autoplay=%s)", media.content_id, position, autoplay
        )
        self._call(
            self._media_controller.play_media,
            media.content_id,
            media.content_type,
            current_time=_to_seconds(position),
            autoplay=autoplay,
            stream_type=media.stream_type,
            metadata=dict(media.metadata),
            media_info=media_info,
        )

    def pause(self) -> None:
        self._call(self._media_controller.pause)

    def seek(self, position: int) -> None:
        self._call(self._media_controller.seek, _to_seconds(position))

    def get_current_media_position(self) -> int:
        self._require_connection()
        return _to_millis(self._media_controller.status.adjusted_current_time)

    def get_playback_status(self) -> _types.RemotePlayerState:
        return _types.RemotePlayerState.parse(self._media_controller.status.player_state)

    def get_idle_reason(self) -> _types.IdleReason:
        return _types.IdleReason.parse(self._media_controller.status.idle_reason)

    def get_remote_media_information(self) -> _types.RemoteMediaInfo | None:
        """Return the media loaded on the receiver, if any.

        :returns: RemoteMediaInfo or None when nothing is loaded.
        :raises NoConnectionError: If no session is established.
        """
        self._require_connection()
        status = self._media_controller.status
        if not status.content_id:
            return None
        return _types.RemoteMediaInfo(
            content_id=status.content_id,
            content_type=status.content_type,
            stream_type=status.stream_type or "BUFFERED",
            metadata=dict(status.media_metadata or {}),
            custom_data=status.media_custom_data or None,
        )

    def is_remote_media_loaded(self) -> bool:
        self._require_connection()
        status = self._media_controller.status
        return bool(status.player_is_playing or status.player_is_paused)

    def is_remote_media_playing(self) -> bool:
        self._require_connection()
        return self.get_playback_status() in (
            _types.RemotePlayerState.PLAYING,
            _types.RemotePlayerState.BUFFERING,
        )

    def add_observer(self, observer: _types.RemoteMediaObserver) -> None:
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)

    def remove_observer(self, observer: _types.RemoteMediaObserver) -> None:
        with self._lock:
            try:
                self._observers.remove(observer)
            except ValueError:
                pass

    def new_media_status(self, status: Any) -> None:
        """Fan a pychromecast media status out to observers.

        Called on the pychromecast socket thread.

        :param status: The pychromecast MediaStatus.
        :returns: None
        """
        custom_data = dict(status.media_custom_data or {})
        metadata_changed = (
            status.content_id != self._last_content_id
            or custom_data != self._last_custom_data
        )
        self._last_content_id = status.content_id
        self._last_custom_data = custom_data

        with self._lock:
            observers = list(self._observers)
        for observer in observers:
            if metadata_changed:
                observer.on_remote_metadata_updated()
            observer.on_remote_status_updated()

    def load_media_failed(self, queue_item_id: int, error_code: int) -> None:
        """Log a load request rejected by the receiver.

        :param queue_item_id: Queue item the failure refers to.
        :param error_code: Receiver error code.
        :returns: None
        """
        _LOGGER.error(
            "Chromecast %s failed to load item %s (error %s)",
            self.name,
            queue_item_id,
            error_code,
        )

    def _require_connection(self) -> None:
        if not self.is_connected():
            raise _errors.NoConnectionError(f"Not connected to {self.name}")

    def _call(self, func: Callable[..., _T], *args: Any, **kwargs: Any) -> _T:
        self._require_connection()
        try:
            return func(*args, **kwargs)
        except NotConnected as e:
            raise _errors.NoConnectionError(str(e)) from e
        except (RequestTimeout, PyChromecastStopped) as e:
            raise _errors.TransientNetworkDisconnectionError(str(e)) from e
        except PyChromecastError as e:
            raise _errors.CastError(str(e)) from e


__all__ = ["ChromecastClient"]
