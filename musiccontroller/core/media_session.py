"""Now-playing / media-button integration.

The OS binding itself lives outside this package. MediaSessionHandler keeps the
state it would publish and routes media-button presses back into whatever
controls are bound (normally the SyncSession). The capability sets are separate
protocols; one object may implement all of them.
"""
import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Protocol, Tuple

from musiccontroller.models.playback import RepeatMode

logger = logging.getLogger(__name__)


class TransportControls(Protocol):
    def play(self) -> None: ...
    def pause(self) -> None: ...
    def next(self) -> None: ...
    def previous(self) -> None: ...
    def set_shuffle(self, enabled: bool) -> None: ...
    def set_repeat(self, mode: RepeatMode) -> None: ...


class SeekControls(Protocol):
    def seek_to(self, position_ms: float) -> None: ...


class QueueControls(Protocol):
    def remove_from_playlist(self, index: int) -> None: ...
    def move_in_playlist(self, from_index: int, to_index: int) -> None: ...


class SessionControls(TransportControls, SeekControls, QueueControls, Protocol):
    """Everything a media session can ask the synchronization session to do."""


class MediaSession(Protocol):
    def bind(self, controls: SessionControls) -> None: ...

    def update_playback_state(
        self,
        *,
        is_playing: bool,
        position_ms: int,
        duration_ms: int,
        repeat_mode: RepeatMode,
        shuffle: bool,
    ) -> None: ...

    def update_now_playing(
        self,
        *,
        title: str,
        artist: str,
        album: str,
        duration_ms: int,
        artwork_url: Optional[str] = None,
    ) -> None: ...


# Control and action names as exposed to the platform media session
CONTROL_PREVIOUS = "skip_to_previous"
CONTROL_PLAY = "play"
CONTROL_PAUSE = "pause"
CONTROL_NEXT = "skip_to_next"
SYSTEM_ACTIONS = frozenset({"seek", "seek_forward", "seek_backward", "skip_to_previous", "skip_to_next"})


@dataclass(frozen=True)
class MediaPlaybackState:
    playing: bool = False
    position_ms: int = 0
    duration_ms: int = 0
    repeat_mode: RepeatMode = RepeatMode.OFF
    shuffle: bool = False
    controls: Tuple[str, ...] = (CONTROL_PREVIOUS, CONTROL_PLAY, CONTROL_NEXT)
    system_actions: FrozenSet[str] = field(default=SYSTEM_ACTIONS)


@dataclass(frozen=True)
class MediaItem:
    id: str
    title: str
    artist: str
    album: str
    duration_ms: int
    artwork_url: Optional[str] = None


def media_controls(is_playing: bool) -> Tuple[str, ...]:
    """Compact controls: previous, play/pause, next."""
    return (CONTROL_PREVIOUS, CONTROL_PAUSE if is_playing else CONTROL_PLAY, CONTROL_NEXT)


class MediaSessionHandler:
    """Default MediaSession: records published state and forwards media buttons."""

    def __init__(self) -> None:
        self._controls: Optional[SessionControls] = None
        self.playback_state = MediaPlaybackState()
        self.media_item: Optional[MediaItem] = None

    @property
    def bound(self) -> bool:
        return self._controls is not None

    def bind(self, controls: SessionControls) -> None:
        """Attach to a session. Replaces any previous binding."""
        if self._controls is not None and self._controls is not controls:
            logger.debug("Media session: rebinding to a new session")
        self._controls = controls

    def unbind(self, controls: SessionControls) -> None:
        if self._controls is controls:
            self._controls = None

    # Published state (session -> platform)

    def update_playback_state(
        self,
        *,
        is_playing: bool,
        position_ms: int,
        duration_ms: int,
        repeat_mode: RepeatMode,
        shuffle: bool,
    ) -> None:
        self.playback_state = MediaPlaybackState(
            playing=is_playing,
            position_ms=position_ms,
            duration_ms=duration_ms,
            repeat_mode=repeat_mode,
            shuffle=shuffle,
            controls=media_controls(is_playing),
        )
        logger.debug(
            "Media session: playing=%s position=%s/%s repeat=%s shuffle=%s",
            is_playing,
            position_ms,
            duration_ms,
            repeat_mode.value,
            shuffle,
        )

    def update_now_playing(
        self,
        *,
        title: str,
        artist: str,
        album: str,
        duration_ms: int,
        artwork_url: Optional[str] = None,
    ) -> None:
        self.media_item = MediaItem(
            id=title,
            title=title,
            artist=artist,
            album=album,
            duration_ms=duration_ms,
            artwork_url=artwork_url or None,
        )
        logger.debug("Media session: now playing %r by %r", title, artist)

    # Media buttons (platform -> session)

    def play(self) -> None:
        if self._controls is not None:
            self._controls.play()

    def pause(self) -> None:
        if self._controls is not None:
            self._controls.pause()

    def seek(self, position_ms: float) -> None:
        if self._controls is not None:
            self._controls.seek_to(position_ms)

    def skip_to_next(self) -> None:
        if self._controls is not None:
            self._controls.next()

    def skip_to_previous(self) -> None:
        if self._controls is not None:
            self._controls.previous()

    def set_shuffle(self, enabled: bool) -> None:
        if self._controls is not None:
            self._controls.set_shuffle(enabled)

    def set_repeat(self, mode: RepeatMode) -> None:
        if self._controls is not None:
            self._controls.set_repeat(mode)

    def remove_queue_item(self, index: int) -> None:
        if self._controls is not None:
            self._controls.remove_from_playlist(index)

    def move_queue_item(self, from_index: int, to_index: int) -> None:
        if self._controls is not None:
            self._controls.move_in_playlist(from_index, to_index)
