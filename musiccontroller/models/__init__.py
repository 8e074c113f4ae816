"""Data models for playback, playlist and session state."""
from musiccontroller.models.playback import (
    PlaybackModeState,
    PlaybackSnapshot,
    PlaylistEntry,
    PlaylistState,
    RepeatMode,
    TrackInfo,
    VolumeState,
)
from musiccontroller.models.session import (
    ConnectionPhase,
    SeekInteraction,
    SessionState,
    clamp_position,
)

__all__ = [
    "ConnectionPhase",
    "PlaybackModeState",
    "PlaybackSnapshot",
    "PlaylistEntry",
    "PlaylistState",
    "RepeatMode",
    "SeekInteraction",
    "SessionState",
    "TrackInfo",
    "VolumeState",
    "clamp_position",
]
