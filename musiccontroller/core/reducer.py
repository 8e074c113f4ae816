"""Fold inbound host messages into SessionState.

Pure: no I/O, no timers. The caller applies the returned extrapolation signal.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from musiccontroller.core.messages import (
    InboundMessage,
    PlaybackModeUpdate,
    PlaybackStateUpdate,
    PlaylistUpdate,
    VolumeUpdate,
)
from musiccontroller.models.playback import (
    PlaybackModeState,
    PlaybackSnapshot,
    PlaylistEntry,
    PlaylistState,
    RepeatMode,
    TrackInfo,
    VolumeState,
)
from musiccontroller.models.session import SessionState, clamp_position


class ExtrapolationSignal(str, Enum):
    NONE = "none"
    RESTART = "restart"  # re-anchor at (displayed position, now) and keep advancing
    STOP = "stop"


@dataclass(frozen=True)
class Reduction:
    state: SessionState
    signal: ExtrapolationSignal = ExtrapolationSignal.NONE


def clamp_volume(volume: float) -> float:
    return max(0.0, min(1.0, float(volume)))


def _snapshot_from(message: PlaybackStateUpdate, now: float) -> PlaybackSnapshot:
    duration_ms = max(0, int(round(message.track.duration)))
    track = TrackInfo(
        title=message.track.title,
        artist=message.track.artist,
        album=message.track.album,
        duration_ms=duration_ms,
        artwork_url=message.track.artwork_url or None,
    )
    return PlaybackSnapshot(
        playing=message.playing,
        track=track,
        position_ms=clamp_position(message.current_position, duration_ms),
        received_at=now,
    )


def _playlist_from(message: PlaylistUpdate) -> PlaylistState:
    entries = []
    for item in message.tracks:
        entries.append(
            PlaylistEntry(
                id=str(item.id) if item.id is not None else None,
                title=item.title,
                artist=item.artist,
                album=item.album,
                extras=dict(item.model_extra or {}),
            )
        )
    return PlaylistState(tracks=tuple(entries), current_index=message.current_index)


def reduce(state: SessionState, message: Optional[InboundMessage], now: float) -> Reduction:
    """Apply one decoded message. Unknown or undecodable input returns state unchanged."""
    if isinstance(message, PlaybackStateUpdate):
        snapshot = _snapshot_from(message, now)
        if state.seek.active:
            # Drag owns the displayed position until release.
            return Reduction(replace(state, playback=snapshot))
        new_state = replace(state, playback=snapshot, displayed_position_ms=snapshot.position_ms)
        if snapshot.playing and snapshot.track.duration_ms > 0:
            return Reduction(new_state, ExtrapolationSignal.RESTART)
        return Reduction(new_state, ExtrapolationSignal.STOP)

    if isinstance(message, PlaylistUpdate):
        return Reduction(replace(state, playlist=_playlist_from(message)))

    if isinstance(message, PlaybackModeUpdate):
        mode = PlaybackModeState(
            shuffle=message.shuffle,
            repeat_mode=RepeatMode.parse(message.repeat_mode),
        )
        return Reduction(replace(state, mode=mode))

    if isinstance(message, VolumeUpdate):
        return Reduction(replace(state, volume=VolumeState(clamp_volume(message.volume))))

    return Reduction(state)
