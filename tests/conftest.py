"""Fixtures for testing the music controller."""
import logging

import pytest

from musiccontroller.core.media_session import MediaSessionHandler
from musiccontroller.core.session import SyncSession
from tests.helpers import FakeChannel, FakeClock


@pytest.fixture(name="caplog")
def caplog_fixture(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Set log level to debug for tests using the caplog fixture."""
    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def channel() -> FakeChannel:
    return FakeChannel()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def media() -> MediaSessionHandler:
    return MediaSessionHandler()


@pytest.fixture
async def session(channel, clock, media):
    """A session wired to the fake channel. The ticker interval is long; tests call tick()."""

    async def _factory():
        return channel

    s = SyncSession(
        _factory,
        media,
        clock=clock,
        tick_interval_sec=3600,
        connect_timeout_sec=None,
        restart_after_seek=False,
    )
    yield s
    await s.close()


@pytest.fixture
async def connected(session):
    assert await session.connect("secret-key")
    return session
