"""Shared application state (injected into routes)."""
import logging
from typing import Optional

from musiccontroller.config import CONTROLLER_WS_URL
from musiccontroller.core.channel import MessageChannel, WebSocketChannel
from musiccontroller.core.media_session import MediaSessionHandler
from musiccontroller.core.session import ChannelFactory, SyncSession

logger = logging.getLogger(__name__)


def _default_channel_factory(url: str = CONTROLLER_WS_URL) -> ChannelFactory:
    async def _open() -> MessageChannel:
        return await WebSocketChannel.open(url)

    return _open


class AppState:
    """Holds the media-session handler and the current controller session.

    Every connect starts a fresh SyncSession; the previous one is closed first.
    The media-session handler is shared, so it is always bound to the live one.
    """

    def __init__(
        self,
        channel_factory: Optional[ChannelFactory] = None,
        media_session: Optional[MediaSessionHandler] = None,
    ) -> None:
        self._channel_factory = channel_factory or _default_channel_factory()
        self.media_session = media_session or MediaSessionHandler()
        self._session: Optional[SyncSession] = None

    @property
    def session(self) -> SyncSession:
        if self._session is None:
            self._session = SyncSession(self._channel_factory, self.media_session)
        return self._session

    async def connect(self, key: str) -> SyncSession:
        if self._session is not None:
            await self._session.close()
        self._session = SyncSession(self._channel_factory, self.media_session)
        await self._session.connect(key)
        return self._session

    async def disconnect(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def shutdown(self) -> None:
        await self.disconnect()
        logger.info("App state: shut down")


_state = AppState()


def get_state() -> AppState:
    return _state
