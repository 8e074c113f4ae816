"""Test doubles shared by the test modules."""
import asyncio
import json
from typing import Any, Dict, List, Optional, Union

from musiccontroller.core.channel import ChannelClosed, ChannelError


class FakeChannel:
    """In-memory MessageChannel; records what the session sends."""

    def __init__(self) -> None:
        self.sent: List[Dict[str, Any]] = []
        self.closed = False
        self._open = True
        self._inbound: "asyncio.Queue[Union[str, Exception]]" = asyncio.Queue()

    @property
    def is_open(self) -> bool:
        return self._open

    def send(self, text: str) -> None:
        if not self._open:
            return
        self.sent.append(json.loads(text))

    def sent_of_type(self, type_: str) -> List[Dict[str, Any]]:
        return [m for m in self.sent if m.get("type") == type_]

    def feed(self, payload: Union[str, Dict[str, Any]]) -> None:
        self._inbound.put_nowait(payload if isinstance(payload, str) else json.dumps(payload))

    def fail(self, error: Optional[Exception] = None) -> None:
        self._inbound.put_nowait(error or ChannelError("connection reset"))

    def hang_up(self) -> None:
        self._inbound.put_nowait(ChannelClosed("1000 normal closure"))

    async def receive(self) -> str:
        item = await self._inbound.get()
        if isinstance(item, Exception):
            self._open = False
            raise item
        return item

    async def close(self) -> None:
        self._open = False
        self.closed = True


class FakeClock:
    """Monotonic clock the test moves by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def playback_update(
    *,
    state: str = "PLAYING",
    position: float = 0.0,
    duration: float = 200000.0,
    title: str = "Song",
    artist: str = "Artist",
    album: str = "Album",
    artwork_url: Optional[str] = None,
) -> Dict[str, Any]:
    track: Dict[str, Any] = {"title": title, "artist": artist, "album": album, "duration": duration}
    if artwork_url is not None:
        track["artworkUrl"] = artwork_url
    return {"type": "PlaybackStateUpdate", "state": state, "track": track, "currentPosition": position}


async def drain() -> None:
    """Let the session's listener task process everything queued so far."""
    for _ in range(10):
        await asyncio.sleep(0)
