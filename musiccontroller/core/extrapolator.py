"""Advance the displayed playback position between host snapshots."""
from typing import Optional


class PositionExtrapolator:
    """Displayed position = reference position + wall time elapsed since the reference.

    Every tick recomputes from the fixed reference, so irregular tick intervals
    cannot accumulate drift. Timestamps are ``time.monotonic()`` seconds.
    """

    def __init__(self, duration_ms: int = 0) -> None:
        self._duration_ms = max(0, int(duration_ms))
        self._ref_position_ms = 0
        self._ref_timestamp: Optional[float] = None
        self._displayed_ms = 0
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def displayed_ms(self) -> int:
        return self._displayed_ms

    @property
    def duration_ms(self) -> int:
        return self._duration_ms

    @duration_ms.setter
    def duration_ms(self, value: int) -> None:
        self._duration_ms = max(0, int(value))

    def _clamp(self, position_ms: float) -> int:
        return int(max(0, min(int(round(position_ms)), self._duration_ms)))

    def reset(self, reference_position_ms: int, reference_timestamp: float) -> None:
        """Re-anchor without changing whether we are running."""
        self._ref_position_ms = int(reference_position_ms)
        self._ref_timestamp = reference_timestamp
        self._displayed_ms = self._clamp(reference_position_ms)

    def start(self, reference_position_ms: int, reference_timestamp: float) -> None:
        self.reset(reference_position_ms, reference_timestamp)
        self._running = True

    def stop(self) -> None:
        """Freeze at the current displayed value."""
        self._running = False

    def tick(self, now: float) -> int:
        if not self._running or self._ref_timestamp is None:
            return self._displayed_ms
        elapsed_ms = (now - self._ref_timestamp) * 1000.0
        # Upper-bound clamping keeps running; only stop() or a new anchor changes that.
        self._displayed_ms = self._clamp(self._ref_position_ms + elapsed_ms)
        return self._displayed_ms
