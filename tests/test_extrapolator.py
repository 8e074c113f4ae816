"""Tests for position extrapolation between snapshots."""
from hypothesis import given
from hypothesis import strategies as st

from musiccontroller.core.extrapolator import PositionExtrapolator

positions = st.integers(min_value=0, max_value=10_000_000)
times = st.floats(min_value=0, max_value=1e6, allow_nan=False, allow_infinity=False)
deltas = st.floats(min_value=0, max_value=1e4, allow_nan=False, allow_infinity=False)


@given(p0=positions, duration=positions, t0=times, dt=deltas)
def test_tick_is_reference_plus_elapsed_clamped(p0, duration, t0, dt):
    extrapolator = PositionExtrapolator(duration)
    extrapolator.start(p0, t0)
    t1 = t0 + dt
    expected = max(0, min(int(round(p0 + (t1 - t0) * 1000.0)), duration))
    assert extrapolator.tick(t1) == expected


@given(p0=positions, t0=times, steps=st.lists(deltas, min_size=1, max_size=20))
def test_irregular_ticks_do_not_drift(p0, t0, steps):
    duration = 20_000_000
    ticked = PositionExtrapolator(duration)
    ticked.start(p0, t0)
    now = t0
    for step in steps:
        now += step
        ticked.tick(now)

    single = PositionExtrapolator(duration)
    single.start(p0, t0)
    assert ticked.displayed_ms == single.tick(now)


def test_keeps_running_at_the_end_of_the_track():
    extrapolator = PositionExtrapolator(duration_ms=10000)
    extrapolator.start(9900, 0.0)
    assert extrapolator.tick(10.0) == 10000
    assert extrapolator.running
    assert extrapolator.tick(20.0) == 10000


def test_stop_freezes_displayed_position():
    extrapolator = PositionExtrapolator(duration_ms=100000)
    extrapolator.start(1000, 0.0)
    assert extrapolator.tick(1.0) == 2000
    extrapolator.stop()
    assert extrapolator.tick(5.0) == 2000
    assert not extrapolator.running


def test_reset_re_anchors_without_stopping():
    extrapolator = PositionExtrapolator(duration_ms=100000)
    extrapolator.start(1000, 0.0)
    extrapolator.reset(50000, 10.0)
    assert extrapolator.running
    assert extrapolator.displayed_ms == 50000
    assert extrapolator.tick(12.0) == 52000


def test_tick_before_start_returns_initial_position():
    extrapolator = PositionExtrapolator(duration_ms=5000)
    assert extrapolator.tick(100.0) == 0


def test_reference_beyond_duration_is_clamped():
    extrapolator = PositionExtrapolator(duration_ms=5000)
    extrapolator.start(8000, 0.0)
    assert extrapolator.displayed_ms == 5000
