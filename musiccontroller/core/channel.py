"""Duplex text channel to the music player host (WebSocket)."""
import asyncio
import logging
from typing import Protocol, Set

from websockets.asyncio.client import ClientConnection, connect
from websockets.exceptions import ConnectionClosed, WebSocketException
from websockets.protocol import State

logger = logging.getLogger(__name__)

# Silence websockets frame dumps
for _name in ("websockets", "websockets.client", "websockets.protocol"):
    logging.getLogger(_name).setLevel(logging.WARNING)


class ChannelError(Exception):
    """Channel could not be opened or failed while in use."""


class ChannelClosed(ChannelError):
    """Channel is closed; no further messages will arrive."""


class MessageChannel(Protocol):
    @property
    def is_open(self) -> bool: ...

    def send(self, text: str) -> None:
        """Queue a text frame for sending. Never blocks, never raises."""

    async def receive(self) -> str:
        """Next inbound text frame. Raises ChannelClosed at the end of the stream."""

    async def close(self) -> None: ...


class WebSocketChannel:
    """MessageChannel over a ``websockets`` client connection."""

    def __init__(self, ws: ClientConnection, url: str) -> None:
        self._ws = ws
        self._url = url
        self._pending: Set[asyncio.Task] = set()

    @classmethod
    async def open(cls, url: str) -> "WebSocketChannel":
        try:
            ws = await connect(url)
        except (OSError, WebSocketException, asyncio.TimeoutError) as e:
            raise ChannelError(f"Could not connect to {url}: {e}") from e
        logger.info("Channel: connected to %s", url)
        return cls(ws, url)

    @property
    def is_open(self) -> bool:
        return self._ws.state is State.OPEN

    def send(self, text: str) -> None:
        if not self.is_open:
            logger.debug("Channel: not open, dropping %s", text)
            return
        task = asyncio.get_running_loop().create_task(self._ws.send(text))
        self._pending.add(task)
        task.add_done_callback(self._on_sent)

    def _on_sent(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        e = task.exception()
        if e is not None:
            logger.warning("Channel: send failed: %s", e)

    async def receive(self) -> str:
        try:
            message = await self._ws.recv()
        except ConnectionClosed as e:
            raise ChannelClosed(str(e)) from e
        except (OSError, WebSocketException) as e:
            raise ChannelError(str(e)) from e
        if isinstance(message, bytes):
            return message.decode("utf-8", errors="replace")
        return message

    async def close(self) -> None:
        for task in list(self._pending):
            task.cancel()
        self._pending.clear()
        try:
            await self._ws.close()
        except (OSError, WebSocketException) as e:
            logger.debug("Channel: close failed: %s", e)
        logger.info("Channel: closed %s", self._url)
