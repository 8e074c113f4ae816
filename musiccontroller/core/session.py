"""Synchronization session: owns the channel, the session state and the position ticker.

All work happens on one asyncio loop. Inbound frames are decoded and reduced,
user intents are encoded and sent fire-and-forget with optimistic local
updates, and an active seek drag always wins over host snapshots.
"""
import asyncio
import logging
import time
from contextlib import suppress
from dataclasses import replace
from typing import Awaitable, Callable, List, Optional

from musiccontroller.config import CONNECT_TIMEOUT_SEC, RESTART_AFTER_SEEK, TICK_INTERVAL_SEC
from musiccontroller.core.channel import ChannelClosed, ChannelError, MessageChannel
from musiccontroller.core.commands import (
    ConnectController,
    Intent,
    MoveInPlaylist,
    Next,
    Pause,
    Play,
    Previous,
    RemoveFromPlaylist,
    RequestFullState,
    SeekTo,
    SetRepeat,
    SetShuffle,
    SetVolume,
    TogglePlayPause,
    encode_json,
)
from musiccontroller.core.extrapolator import PositionExtrapolator
from musiccontroller.core.media_session import MediaSession, MediaSessionHandler
from musiccontroller.core.messages import PlaybackModeUpdate, PlaybackStateUpdate, decode_message
from musiccontroller.core.reducer import ExtrapolationSignal, Reduction, clamp_volume, reduce
from musiccontroller.core.ticker import Ticker
from musiccontroller.models.playback import RepeatMode, VolumeState
from musiccontroller.models.session import (
    ConnectionPhase,
    SeekInteraction,
    SessionState,
    clamp_position,
)

logger = logging.getLogger(__name__)

CONNECTION_LOST_NOTICE = "Connection lost. Please reconnect."
CONNECT_FAILED_NOTICE = "Could not connect to the player. Check the host and try again."

ChannelFactory = Callable[[], Awaitable[MessageChannel]]
StateListener = Callable[[SessionState], None]


class SyncSession:
    """One controller session against the music player host.

    A session can reconnect after a lost channel (``connect`` again with a
    key); it never retries by itself. ``close`` is final.
    """

    def __init__(
        self,
        channel_factory: ChannelFactory,
        media_session: Optional[MediaSession] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        tick_interval_sec: float = TICK_INTERVAL_SEC,
        connect_timeout_sec: Optional[float] = CONNECT_TIMEOUT_SEC,
        restart_after_seek: bool = RESTART_AFTER_SEEK,
    ) -> None:
        self._channel_factory = channel_factory
        self._media_session = media_session if media_session is not None else MediaSessionHandler()
        self._clock = clock
        self._connect_timeout_sec = connect_timeout_sec
        self._restart_after_seek = restart_after_seek
        self._state = SessionState()
        self._channel: Optional[MessageChannel] = None
        self._listener: Optional[asyncio.Task] = None
        self._extrapolator = PositionExtrapolator()
        self._ticker = Ticker(tick_interval_sec, self.tick, name="position-ticker")
        self._subscribers: List[StateListener] = []
        self._media_session.bind(self)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def phase(self) -> ConnectionPhase:
        return self._state.phase

    @property
    def media_session(self) -> MediaSession:
        return self._media_session

    @property
    def extrapolating(self) -> bool:
        """True while the displayed position is being advanced by the ticker."""
        return self._extrapolator.running and self._ticker.running

    # State ownership

    def subscribe(self, callback: StateListener) -> Callable[[], None]:
        """Call ``callback`` with every new state. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def _set_state(self, state: SessionState) -> None:
        if state is self._state:
            return
        self._state = state
        for callback in list(self._subscribers):
            try:
                callback(state)
            except Exception:
                logger.exception("Session: state subscriber failed")

    # Channel lifecycle

    async def connect(self, key: str) -> bool:
        """Open the channel, pair with ``key`` and ask for the full state.

        Returns False (phase DISCONNECTED, notice set) if the channel cannot be
        opened. Does not wait for the host's first snapshot.
        """
        if not key:
            raise ValueError("Connection key is required")
        if self._state.phase is ConnectionPhase.CLOSED:
            raise RuntimeError("Session is closed")
        await self._teardown()
        self._set_state(SessionState(phase=ConnectionPhase.CONNECTING))
        logger.info("Session: connecting")

        try:
            if self._connect_timeout_sec:
                channel = await asyncio.wait_for(self._channel_factory(), self._connect_timeout_sec)
            else:
                channel = await self._channel_factory()
        except (ChannelError, asyncio.TimeoutError) as e:
            logger.warning("Session: connect failed: %s", e or type(e).__name__)
            if self._state.phase is ConnectionPhase.CONNECTING:
                self._set_state(
                    replace(self._state, phase=ConnectionPhase.DISCONNECTED, notice=CONNECT_FAILED_NOTICE)
                )
            return False

        if self._state.phase is not ConnectionPhase.CONNECTING:
            # Closed while the channel was opening.
            await channel.close()
            return False

        self._channel = channel
        channel.send(encode_json(ConnectController(key)))
        channel.send(encode_json(RequestFullState()))
        self._set_state(replace(self._state, phase=ConnectionPhase.CONNECTED))
        self._listener = asyncio.get_running_loop().create_task(
            self._listen(channel), name="session-listener"
        )
        logger.info("Session: connected, requested current state")
        return True

    async def _listen(self, channel: MessageChannel) -> None:
        try:
            while True:
                raw = await channel.receive()
                try:
                    self.handle_message(raw)
                except Exception:
                    logger.exception("Session: failed to apply inbound message, ignoring it")
        except ChannelClosed as e:
            await self._on_channel_lost(channel, f"closed ({e})")
        except ChannelError as e:
            await self._on_channel_lost(channel, str(e))

    async def _on_channel_lost(self, channel: MessageChannel, reason: str) -> None:
        if channel is not self._channel:
            return
        logger.warning("Session: connection lost: %s", reason)
        self._stop_extrapolation()
        self._listener = None
        self._channel = None
        self._set_state(
            replace(
                self._state,
                phase=ConnectionPhase.DISCONNECTED,
                seek=SeekInteraction(),
                notice=CONNECTION_LOST_NOTICE,
            )
        )
        await channel.close()

    async def _teardown(self) -> None:
        # Order matters: ticker, then listener, then channel.
        self._stop_extrapolation()
        listener, self._listener = self._listener, None
        if listener is not None and listener is not asyncio.current_task():
            listener.cancel()
            with suppress(asyncio.CancelledError):
                await listener
        channel, self._channel = self._channel, None
        if channel is not None:
            await channel.close()

    async def close(self) -> None:
        """End the session for good. Safe to call more than once."""
        if self._state.phase is ConnectionPhase.CLOSED:
            return
        await self._teardown()
        self._set_state(replace(self._state, phase=ConnectionPhase.CLOSED, seek=SeekInteraction()))
        unbind = getattr(self._media_session, "unbind", None)
        if unbind is not None:
            unbind(self)
        logger.info("Session: closed")

    # Inbound

    def handle_message(self, raw: str) -> None:
        """Decode and apply one inbound frame. Unknown or malformed frames are ignored."""
        message = decode_message(raw)
        if message is None:
            return
        now = self._clock()
        reduction = reduce(self._state, message, now)
        self._apply_signal(reduction, now)
        self._set_state(reduction.state)
        if isinstance(message, PlaybackStateUpdate):
            self._publish_now_playing()
            # The host's position, even while the user is dragging.
            self._publish_playback_state(position_ms=reduction.state.playback.position_ms)
        elif isinstance(message, PlaybackModeUpdate):
            self._publish_playback_state()

    def _apply_signal(self, reduction: Reduction, now: float) -> None:
        if reduction.signal is ExtrapolationSignal.RESTART:
            self._start_extrapolation(reduction.state, now)
        elif reduction.signal is ExtrapolationSignal.STOP:
            self._stop_extrapolation()

    # Extrapolation

    def _start_extrapolation(self, state: SessionState, now: float) -> None:
        self._extrapolator.duration_ms = state.duration_ms
        if self._extrapolator.running:
            self._extrapolator.reset(state.displayed_position_ms, now)
        else:
            self._extrapolator.start(state.displayed_position_ms, now)
        self._ticker.start()

    def _stop_extrapolation(self) -> None:
        self._ticker.stop()
        self._extrapolator.stop()

    def tick(self) -> None:
        """Advance the displayed position from wall-clock time."""
        if self._state.seek.active or not self._extrapolator.running:
            return
        position = self._extrapolator.tick(self._clock())
        if position != self._state.displayed_position_ms:
            self._set_state(replace(self._state, displayed_position_ms=position))

    # Media session

    def _publish_playback_state(self, position_ms: Optional[int] = None) -> None:
        state = self._state
        if position_ms is None:
            position_ms = state.position_for_display
        try:
            self._media_session.update_playback_state(
                is_playing=state.is_playing,
                position_ms=position_ms,
                duration_ms=state.duration_ms,
                repeat_mode=state.mode.repeat_mode,
                shuffle=state.mode.shuffle,
            )
        except Exception:
            logger.exception("Session: media session playback update failed")

    def _publish_now_playing(self) -> None:
        track = self._state.track
        if track is None:
            return
        try:
            self._media_session.update_now_playing(
                title=track.title,
                artist=track.artist,
                album=track.album,
                duration_ms=track.duration_ms,
                artwork_url=track.artwork_url,
            )
        except Exception:
            logger.exception("Session: media session now-playing update failed")

    # Intents

    def _send(self, intent: Intent) -> bool:
        channel = self._channel
        if self._state.phase is not ConnectionPhase.CONNECTED or channel is None or not channel.is_open:
            logger.debug("Session: not connected, dropping %s", type(intent).__name__)
            return False
        channel.send(encode_json(intent))
        return True

    def _set_playing(self, playing: bool) -> None:
        playback = self._state.playback
        if playback is None:
            return
        self._set_state(replace(self._state, playback=replace(playback, playing=playing)))
        if playing and not self._state.seek.active and self._state.duration_ms > 0:
            self._start_extrapolation(self._state, self._clock())
        elif not playing:
            self._stop_extrapolation()
        self._publish_playback_state()

    def play(self) -> None:
        if self._send(Play()):
            self._set_playing(True)

    def pause(self) -> None:
        if self._send(Pause()):
            self._set_playing(False)

    def toggle_play_pause(self) -> None:
        playing = self._state.is_playing
        if self._send(TogglePlayPause(currently_playing=playing)):
            self._set_playing(not playing)

    def next(self) -> None:
        self._send(Next())

    def previous(self) -> None:
        self._send(Previous())

    def request_full_state(self) -> None:
        self._send(RequestFullState())

    def set_shuffle(self, enabled: bool) -> None:
        if self._send(SetShuffle(enabled)):
            self._set_state(replace(self._state, mode=replace(self._state.mode, shuffle=bool(enabled))))
            self._publish_playback_state()

    def toggle_shuffle(self) -> None:
        self.set_shuffle(not self._state.mode.shuffle)

    def set_repeat(self, mode: RepeatMode) -> None:
        mode = RepeatMode(mode)
        if self._send(SetRepeat(mode)):
            self._set_state(replace(self._state, mode=replace(self._state.mode, repeat_mode=mode)))
            self._publish_playback_state()

    def cycle_repeat(self) -> None:
        self.set_repeat(self._state.mode.repeat_mode.next())

    def set_volume(self, volume: float) -> None:
        volume = clamp_volume(volume)
        if self._send(SetVolume(volume)):
            self._set_state(replace(self._state, volume=VolumeState(volume)))

    def remove_from_playlist(self, index: int) -> None:
        # The host's next PlaylistUpdate carries the new order.
        self._send(RemoveFromPlaylist(index))

    def move_in_playlist(self, from_index: int, to_index: int) -> None:
        self._send(MoveInPlaylist(from_index, to_index))

    def seek_to(self, position_ms: float) -> None:
        """Seek without a drag gesture (media buttons, API)."""
        if self._state.phase is not ConnectionPhase.CONNECTED:
            logger.debug("Session: not connected, dropping SeekTo")
            return
        self._commit_seek(clamp_position(position_ms, self._state.duration_ms))

    # Seek drag

    def begin_drag(self, position_ms: float) -> None:
        """User grabbed the seek control. Purely local."""
        position = clamp_position(position_ms, self._state.duration_ms)
        self._stop_extrapolation()
        self._set_state(
            replace(
                self._state,
                seek=SeekInteraction(active=True, drag_position_ms=position),
                displayed_position_ms=position,
            )
        )

    def update_drag(self, position_ms: float) -> None:
        """Intermediate drag value. Purely local; nothing is sent."""
        if not self._state.seek.active:
            self.begin_drag(position_ms)
            return
        position = clamp_position(position_ms, self._state.duration_ms)
        self._set_state(
            replace(
                self._state,
                seek=SeekInteraction(active=True, drag_position_ms=position),
                displayed_position_ms=position,
            )
        )

    def end_drag(self, position_ms: float) -> None:
        """User released the seek control: one SeekCommand for the final value."""
        self._commit_seek(clamp_position(position_ms, self._state.duration_ms))

    def _commit_seek(self, position: int) -> None:
        self._stop_extrapolation()
        self._set_state(replace(self._state, seek=SeekInteraction(), displayed_position_ms=position))
        sent = self._send(SeekTo(position))
        # By default wait for the host's next snapshot before advancing again.
        if sent and self._restart_after_seek and self._state.is_playing and self._state.duration_ms > 0:
            self._start_extrapolation(self._state, self._clock())
