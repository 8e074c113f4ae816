"""Tests for folding host messages into session state."""
import json
from dataclasses import replace

from musiccontroller.core.messages import decode_message
from musiccontroller.core.reducer import ExtrapolationSignal, reduce
from musiccontroller.models.playback import RepeatMode
from musiccontroller.models.session import SeekInteraction, SessionState, clamp_position
from tests.helpers import playback_update


def _msg(payload):
    return decode_message(json.dumps(payload))


def test_playing_snapshot_restarts_extrapolation():
    result = reduce(SessionState(), _msg(playback_update(position=50000)), now=12.5)
    assert result.signal is ExtrapolationSignal.RESTART
    assert result.state.displayed_position_ms == 50000
    assert result.state.playback.received_at == 12.5
    assert result.state.is_playing


def test_paused_snapshot_stops_extrapolation():
    result = reduce(SessionState(), _msg(playback_update(state="PAUSED", position=1000)), now=0)
    assert result.signal is ExtrapolationSignal.STOP
    assert result.state.displayed_position_ms == 1000


def test_playing_with_unknown_duration_does_not_extrapolate():
    result = reduce(SessionState(), _msg(playback_update(duration=0, position=500)), now=0)
    assert result.signal is ExtrapolationSignal.STOP
    assert result.state.displayed_position_ms == 0


def test_position_is_clamped_to_duration():
    result = reduce(SessionState(), _msg(playback_update(position=250000, duration=200000)), now=0)
    assert result.state.playback.position_ms == 200000
    assert result.state.displayed_position_ms == 200000
    negative = reduce(SessionState(), _msg(playback_update(position=-40)), now=0)
    assert negative.state.displayed_position_ms == 0


def test_snapshot_fully_replaces_previous_one():
    first = reduce(
        SessionState(),
        _msg(playback_update(title="A", artist="X", album="Old", artwork_url="http://img/a.png")),
        now=0,
    ).state
    second = reduce(first, _msg(playback_update(title="B", artist="Y", album="New")), now=1).state
    assert second.track.title == "B"
    assert second.track.album == "New"
    assert second.track.artwork_url is None


def test_empty_artwork_means_no_artwork():
    state = reduce(SessionState(), _msg(playback_update(artwork_url="")), now=0).state
    assert state.track.artwork_url is None


def test_snapshot_during_drag_does_not_touch_displayed_position():
    dragging = replace(
        SessionState(),
        seek=SeekInteraction(active=True, drag_position_ms=20000),
        displayed_position_ms=20000,
    )
    result = reduce(dragging, _msg(playback_update(position=90000)), now=0)
    assert result.signal is ExtrapolationSignal.NONE
    assert result.state.displayed_position_ms == 20000
    assert result.state.playback.position_ms == 90000


def test_playlist_update_replaces_playlist():
    state = reduce(
        SessionState(),
        _msg({"type": "PlaylistUpdate", "tracks": [{"id": "a", "title": "One"}, {"title": "Two"}], "currentIndex": 0}),
        now=0,
    ).state
    state = reduce(
        state,
        _msg({"type": "PlaylistUpdate", "tracks": [{"id": 9, "title": "Three", "genre": "jazz"}], "currentIndex": 0}),
        now=1,
    ).state
    assert [t.title for t in state.playlist.tracks] == ["Three"]
    assert state.playlist.tracks[0].id == "9"
    assert state.playlist.tracks[0].extras == {"genre": "jazz"}


def test_playlist_entry_key_falls_back_to_title():
    state = reduce(
        SessionState(),
        _msg({"type": "PlaylistUpdate", "tracks": [{"title": "Untitled"}], "currentIndex": 0}),
        now=0,
    ).state
    assert state.playlist.tracks[0].key == "Untitled"


def test_mode_update():
    state = reduce(
        SessionState(), _msg({"type": "PlaybackModeUpdate", "shuffle": True, "repeatMode": "ONE"}), now=0
    ).state
    assert state.mode.shuffle is True
    assert state.mode.repeat_mode is RepeatMode.ONE


def test_unknown_repeat_mode_is_off():
    state = reduce(
        SessionState(), _msg({"type": "PlaybackModeUpdate", "shuffle": False, "repeatMode": "GROUP"}), now=0
    ).state
    assert state.mode.repeat_mode is RepeatMode.OFF


def test_volume_update_is_clamped():
    assert reduce(SessionState(), _msg({"type": "VolumeUpdate", "volume": 0.3}), now=0).state.volume.volume == 0.3
    assert reduce(SessionState(), _msg({"type": "VolumeUpdate", "volume": 1.4}), now=0).state.volume.volume == 1.0
    assert reduce(SessionState(), _msg({"type": "VolumeUpdate", "volume": -2}), now=0).state.volume.volume == 0.0


def test_ignored_message_returns_same_state():
    before = SessionState()
    result = reduce(before, _msg({"type": "Unknown"}), now=0)
    assert result.state is before
    assert result.signal is ExtrapolationSignal.NONE


def test_clamp_position_reads_non_finite_as_zero():
    assert clamp_position(float("nan"), 5000) == 0
    assert clamp_position(float("inf"), 5000) == 0
    assert clamp_position(float("-inf"), 5000) == 0
    assert clamp_position(4999.6, 5000) == 5000
