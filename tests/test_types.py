"""Unit tests for castplayback.types module."""

import dataclasses

import pytest

from castplayback.types import (
    IdleReason,
    MediaID,
    MusicID,
    PlaybackSession,
    PlaybackState,
    QueueItem,
    RemoteMediaInfo,
    RemotePlayerState,
    TrackDescriptor,
)


def test_track_descriptor_is_immutable() -> None:
    """Test TrackDescriptor cannot be modified."""
    track = TrackDescriptor(music_id=MusicID("1"), source="http://example.com/1.mp3")
    assert track.title is None
    with pytest.raises(dataclasses.FrozenInstanceError):
        track.title = "Changed"  # type: ignore[misc]


def test_playback_session_defaults() -> None:
    """Test a new session is empty."""
    session = PlaybackSession()
    assert session.state == PlaybackState.NONE
    assert session.media_id is None
    assert session.position == 0


def test_remote_media_info_defaults() -> None:
    """Test RemoteMediaInfo creation."""
    info = RemoteMediaInfo(content_id="http://example.com/1.mp3")
    assert info.stream_type == "BUFFERED"
    assert info.metadata == {}
    assert info.custom_data is None


def test_queue_item() -> None:
    """Test QueueItem creation."""
    item = QueueItem(MediaID("a|1"), queue_id=3)
    assert item.media_id == "a|1"
    assert item.queue_id == 3


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("PLAYING", RemotePlayerState.PLAYING),
        ("IDLE", RemotePlayerState.IDLE),
        ("LOADING", RemotePlayerState.UNKNOWN),
        (None, RemotePlayerState.UNKNOWN),
    ],
)
def test_remote_player_state_parse(value: str | None, expected: RemotePlayerState) -> None:
    """Test parsing receiver player states."""
    assert RemotePlayerState.parse(value) is expected


def test_idle_reason_parse() -> None:
    """Test parsing receiver idle reasons."""
    assert IdleReason.parse("FINISHED") is IdleReason.FINISHED
    assert IdleReason.parse(None) is IdleReason.NONE
    assert IdleReason.parse("SOMETHING") is IdleReason.NONE
