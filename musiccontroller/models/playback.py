"""Playback, playlist, mode and volume state mirrored from the host."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Tuple


class RepeatMode(str, Enum):
    """Repeat mode as the host names it on the wire."""
    OFF = "OFF"
    ALL = "ALL"
    ONE = "ONE"

    @classmethod
    def parse(cls, value: Any) -> "RepeatMode":
        """Map a wire value to a mode; anything unknown is OFF."""
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.OFF

    def next(self) -> "RepeatMode":
        """OFF -> ALL -> ONE -> OFF, the order the repeat button cycles through."""
        order = (RepeatMode.OFF, RepeatMode.ALL, RepeatMode.ONE)
        return order[(order.index(self) + 1) % len(order)]


@dataclass(frozen=True)
class TrackInfo:
    """Track currently loaded on the host."""
    title: str
    artist: str
    album: str
    duration_ms: int
    artwork_url: Optional[str] = None


@dataclass(frozen=True)
class PlaybackSnapshot:
    """One authoritative playback push. Superseded wholesale by the next one."""
    playing: bool
    track: TrackInfo
    position_ms: int
    received_at: float


@dataclass(frozen=True)
class PlaylistEntry:
    """Playlist row; extra host fields are kept in extras."""
    id: Optional[str]
    title: str
    artist: str = ""
    album: str = ""
    extras: Mapping[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return self.id if self.id is not None else self.title


@dataclass(frozen=True)
class PlaylistState:
    tracks: Tuple[PlaylistEntry, ...] = ()
    current_index: int = 0


@dataclass(frozen=True)
class PlaybackModeState:
    shuffle: bool = False
    repeat_mode: RepeatMode = RepeatMode.OFF


@dataclass(frozen=True)
class VolumeState:
    volume: float = 1.0
