"""Aggregate client-side session state."""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from musiccontroller.models.playback import (
    PlaybackModeState,
    PlaybackSnapshot,
    PlaylistState,
    TrackInfo,
    VolumeState,
)


class ConnectionPhase(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


@dataclass(frozen=True)
class SeekInteraction:
    """Seek-control gesture in progress. While active it owns the displayed position."""
    active: bool = False
    drag_position_ms: int = 0


@dataclass(frozen=True)
class SessionState:
    """Everything the presentation layer renders.

    Replaced as a whole on every change; consumers may keep references to old
    instances without seeing them mutate.
    """
    phase: ConnectionPhase = ConnectionPhase.DISCONNECTED
    playback: Optional[PlaybackSnapshot] = None
    playlist: PlaylistState = field(default_factory=PlaylistState)
    mode: PlaybackModeState = field(default_factory=PlaybackModeState)
    volume: VolumeState = field(default_factory=VolumeState)
    seek: SeekInteraction = field(default_factory=SeekInteraction)
    displayed_position_ms: int = 0
    notice: Optional[str] = None

    @property
    def track(self) -> Optional[TrackInfo]:
        return self.playback.track if self.playback is not None else None

    @property
    def is_playing(self) -> bool:
        return self.playback is not None and self.playback.playing

    @property
    def duration_ms(self) -> int:
        return self.playback.track.duration_ms if self.playback is not None else 0

    @property
    def position_for_display(self) -> int:
        """Drag position while the user is scrubbing, otherwise the displayed position."""
        if self.seek.active:
            return self.seek.drag_position_ms
        return self.displayed_position_ms


def clamp_position(position_ms: float, duration_ms: int) -> int:
    """Round to whole milliseconds and clamp to [0, duration_ms]. NaN and infinities read as 0."""
    if not math.isfinite(position_ms):
        return 0
    return int(max(0, min(int(round(position_ms)), max(0, duration_ms))))
