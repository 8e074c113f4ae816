"""Outbound commands: user intents -> protocol payloads.

Every intent has exactly one encoding. The encoder does no validation; callers
clamp values (volume, seek position) before building an intent.
"""
import json
from dataclasses import dataclass
from typing import Any, Dict, Union

from musiccontroller.models.playback import RepeatMode


@dataclass(frozen=True)
class ConnectController:
    key: str


@dataclass(frozen=True)
class Play:
    pass


@dataclass(frozen=True)
class Pause:
    pass


@dataclass(frozen=True)
class TogglePlayPause:
    currently_playing: bool


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class Previous:
    pass


@dataclass(frozen=True)
class SeekTo:
    position_ms: float


@dataclass(frozen=True)
class SetShuffle:
    enabled: bool


@dataclass(frozen=True)
class SetRepeat:
    mode: RepeatMode


@dataclass(frozen=True)
class SetVolume:
    volume: float


@dataclass(frozen=True)
class RequestFullState:
    pass


@dataclass(frozen=True)
class RemoveFromPlaylist:
    index: int


@dataclass(frozen=True)
class MoveInPlaylist:
    """Reorder as reported by a list widget: to_index is in the pre-removal frame."""
    from_index: int
    to_index: int


Intent = Union[
    ConnectController,
    Play,
    Pause,
    TogglePlayPause,
    Next,
    Previous,
    SeekTo,
    SetShuffle,
    SetRepeat,
    SetVolume,
    RequestFullState,
    RemoveFromPlaylist,
    MoveInPlaylist,
]


def _playback(action: str) -> Dict[str, Any]:
    return {"type": "PlaybackCommand", "action": action}


def move_target_index(from_index: int, to_index: int) -> int:
    """Convert a drop index to the post-removal frame the host expects."""
    if from_index < to_index:
        return to_index - 1
    return to_index


def encode_intent(intent: Intent) -> Dict[str, Any]:
    """Return the wire payload for an intent."""
    if isinstance(intent, ConnectController):
        return {"type": "ControllerConnect", "key": intent.key}
    if isinstance(intent, Play):
        return _playback("PLAY")
    if isinstance(intent, Pause):
        return _playback("PAUSE")
    if isinstance(intent, TogglePlayPause):
        return _playback("PAUSE" if intent.currently_playing else "PLAY")
    if isinstance(intent, Next):
        return _playback("NEXT")
    if isinstance(intent, Previous):
        return _playback("PREVIOUS")
    if isinstance(intent, SeekTo):
        return {"type": "SeekCommand", "position": float(intent.position_ms)}
    if isinstance(intent, SetShuffle):
        return {"type": "ShuffleCommand", "enabled": bool(intent.enabled)}
    if isinstance(intent, SetRepeat):
        return {"type": "RepeatCommand", "mode": RepeatMode(intent.mode).value}
    if isinstance(intent, SetVolume):
        return {"type": "VolumeCommand", "volume": float(intent.volume)}
    if isinstance(intent, RequestFullState):
        return {"type": "RequestCurrentState"}
    if isinstance(intent, RemoveFromPlaylist):
        return {"type": "PlaylistRemoveCommand", "index": int(intent.index)}
    if isinstance(intent, MoveInPlaylist):
        return {
            "type": "PlaylistMoveCommand",
            "fromIndex": int(intent.from_index),
            "toIndex": move_target_index(intent.from_index, intent.to_index),
        }
    raise TypeError(f"Not an intent: {intent!r}")


def encode_json(intent: Intent) -> str:
    """Encode an intent as the JSON text frame sent on the channel."""
    return json.dumps(encode_intent(intent))
