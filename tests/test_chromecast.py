"""Tests for the Chromecast remote media client."""

import uuid
from unittest.mock import MagicMock, patch

import pytest
from pychromecast.error import NotConnected, RequestFailed, RequestTimeout  # type: ignore

import castplayback.chromecast.client as _chromecast_client
import castplayback.errors as _errors
import castplayback.types as _types


@pytest.fixture
def mock_cast() -> MagicMock:
    """Create a mock pychromecast object.

    :returns: A MagicMock simulating a connected Chromecast.
    """
    cast_obj = MagicMock()
    cast_obj.uuid = uuid.uuid4()
    cast_obj.name = "Test Chromecast"
    cast_obj.model_name = "Chromecast Audio"
    cast_obj.cast_type = "audio"
    cast_obj.socket_client.is_connected = True
    cast_obj.media_controller = MagicMock()
    status = cast_obj.media_controller.status
    status.player_state = "PLAYING"
    status.idle_reason = None
    status.adjusted_current_time = 12.5
    status.content_id = "http://example.com/42.mp3"
    status.content_type = "audio/mpeg"
    status.stream_type = "BUFFERED"
    status.media_metadata = {"title": "Answer"}
    status.media_custom_data = {"itemId": "track-42"}
    status.player_is_playing = True
    status.player_is_paused = False
    return cast_obj


@pytest.fixture
def client(mock_cast: MagicMock) -> _chromecast_client.ChromecastClient:
    """Create a client around the mock Chromecast.

    :param mock_cast: The mock_cast fixture.
    :returns: A ChromecastClient.
    """
    return _chromecast_client.ChromecastClient(mock_cast)


def _media() -> _types.RemoteMediaInfo:
    return _types.RemoteMediaInfo(
        content_id="http://example.com/42.mp3",
        content_type="audio/mpeg",
        metadata={"metadataType": 3, "title": "Answer"},
        custom_data={"itemId": "track-42"},
    )


def test_connect_registers_listener_once(
    client: _chromecast_client.ChromecastClient, mock_cast: MagicMock
) -> None:
    """Test connect() waits for the device and subscribes once."""
    client.connect(5.0)
    client.connect(5.0)

    mock_cast.wait.assert_called_with(timeout=5.0)
    mock_cast.media_controller.register_status_listener.assert_called_once_with(client)


def test_connect_timeout(
    client: _chromecast_client.ChromecastClient, mock_cast: MagicMock
) -> None:
    """Test a connection timeout maps to NoConnectionError."""
    mock_cast.wait.side_effect = RequestTimeout("wait", 1.0)
    with pytest.raises(_errors.NoConnectionError):
        client.connect(1.0)


def test_disconnect_stops_browser(mock_cast: MagicMock) -> None:
    """Test disconnect() releases the device and the discovery browser."""
    browser = MagicMock()
    client = _chromecast_client.ChromecastClient(mock_cast, browser)
    client.disconnect()
    client.disconnect()

    assert mock_cast.disconnect.call_count == 2
    browser.stop_discovery.assert_called_once()


def test_load_media(
    client: _chromecast_client.ChromecastClient, mock_cast: MagicMock
) -> None:
    """Test load_media() forwards to play_media with custom data."""
    client.load_media(_media(), False, 30500, {"itemId": "track-42"})

    mock_cast.media_controller.play_media.assert_called_once_with(
        "http://example.com/42.mp3",
        "audio/mpeg",
        current_time=30.5,
        autoplay=False,
        stream_type="BUFFERED",
        metadata={"metadataType": 3, "title": "Answer"},
        media_info={"customData": {"itemId": "track-42"}},
    )


def test_load_media_not_connected(
    client: _chromecast_client.ChromecastClient, mock_cast: MagicMock
) -> None:
    """Test control calls fail fast without a connection."""
    mock_cast.socket_client.is_connected = False
    with pytest.raises(_errors.NoConnectionError):
        client.load_media(_media(), True, 0)
    mock_cast.media_controller.play_media.assert_not_called()


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (NotConnected("gone"), _errors.NoConnectionError),
        (RequestTimeout("pause", 10.0), _errors.TransientNetworkDisconnectionError),
        (RequestFailed("pause"), _errors.CastError),
    ],
)
def test_error_mapping(
    client: _chromecast_client.ChromecastClient,
    mock_cast: MagicMock,
    error: Exception,
    expected: type[Exception],
) -> None:
    """Test pychromecast errors map onto castplayback errors."""
    mock_cast.media_controller.pause.side_effect = error
    with pytest.raises(expected):
        client.pause()


def test_seek_converts_to_seconds(
    client: _chromecast_client.ChromecastClient, mock_cast: MagicMock
) -> None:
    """Test seek() converts milliseconds to seconds."""
    client.seek(90000)
    mock_cast.media_controller.seek.assert_called_once_with(90.0)


def test_status_queries(client: _chromecast_client.ChromecastClient) -> None:
    """Test status queries read the current media status."""
    assert client.get_current_media_position() == 12500
    assert client.get_playback_status() == _types.RemotePlayerState.PLAYING
    assert client.get_idle_reason() == _types.IdleReason.NONE
    assert client.is_remote_media_loaded()
    assert client.is_remote_media_playing()

    info = client.get_remote_media_information()
    assert info is not None
    assert info.content_id == "http://example.com/42.mp3"
    assert info.custom_data == {"itemId": "track-42"}
    assert info.metadata == {"title": "Answer"}


def test_status_unknown_state(
    client: _chromecast_client.ChromecastClient, mock_cast: MagicMock
) -> None:
    """Test unrecognised receiver states parse as UNKNOWN."""
    mock_cast.media_controller.status.player_state = "LOADING"
    mock_cast.media_controller.status.idle_reason = "FINISHED"
    assert client.get_playback_status() == _types.RemotePlayerState.UNKNOWN
    assert client.get_idle_reason() == _types.IdleReason.FINISHED


def test_no_remote_media(
    client: _chromecast_client.ChromecastClient, mock_cast: MagicMock
) -> None:
    """Test an empty receiver reports no media information."""
    mock_cast.media_controller.status.content_id = None
    assert client.get_remote_media_information() is None


def test_queries_not_connected(
    client: _chromecast_client.ChromecastClient, mock_cast: MagicMock
) -> None:
    """Test live queries raise NoConnectionError when disconnected."""
    mock_cast.socket_client.is_connected = False
    assert not client.is_connected()
    with pytest.raises(_errors.NoConnectionError):
        client.get_current_media_position()
    with pytest.raises(_errors.NoConnectionError):
        client.get_remote_media_information()
    with pytest.raises(_errors.NoConnectionError):
        client.is_remote_media_playing()


def test_observer_fan_out(
    client: _chromecast_client.ChromecastClient, mock_cast: MagicMock
) -> None:
    """Test media status is fanned out with metadata changes detected."""
    observer = MagicMock(spec=_types.RemoteMediaObserver)
    client.add_observer(observer)
    client.add_observer(observer)
    status = mock_cast.media_controller.status

    client.new_media_status(status)
    assert observer.on_remote_metadata_updated.call_count == 1
    assert observer.on_remote_status_updated.call_count == 1

    # Same media, new status: no metadata notification
    client.new_media_status(status)
    assert observer.on_remote_metadata_updated.call_count == 1
    assert observer.on_remote_status_updated.call_count == 2

    status.media_custom_data = {"itemId": "track-7"}
    client.new_media_status(status)
    assert observer.on_remote_metadata_updated.call_count == 2

    client.remove_observer(observer)
    client.remove_observer(observer)
    client.new_media_status(status)
    assert observer.on_remote_status_updated.call_count == 3


def test_load_media_failed_logs(
    client: _chromecast_client.ChromecastClient, caplog: pytest.LogCaptureFixture
) -> None:
    """Test receiver load failures are logged."""
    client.load_media_failed(3, 104)
    assert "failed to load item 3" in caplog.text


def test_discover(mock_cast: MagicMock) -> None:
    """Test discovery by friendly name."""
    browser = MagicMock()
    with patch(
        "pychromecast.get_listed_chromecasts", return_value=([mock_cast], browser)
    ) as mock_get:
        client = _chromecast_client.ChromecastClient.discover("Test Chromecast", timeout=2.0)

    mock_get.assert_called_once_with(
        friendly_names=["Test Chromecast"], discovery_timeout=2.0
    )
    assert client.name == "Test Chromecast"
    browser.stop_discovery.assert_not_called()


def test_discover_not_found() -> None:
    """Test discovery failure stops the browser and raises."""
    browser = MagicMock()
    with (
        patch("pychromecast.get_listed_chromecasts", return_value=([], browser)),
        pytest.raises(_errors.NoConnectionError),
    ):
        _chromecast_client.ChromecastClient.discover("Missing")
    browser.stop_discovery.assert_called_once()
