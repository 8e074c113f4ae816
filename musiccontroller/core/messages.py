"""Inbound host messages: JSON text -> typed messages.

Anything that is not a well-formed message with a known ``type`` decodes to
None so a newer host cannot break the controller.
"""
import json
import logging
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, allow_inf_nan=False)


class TrackPayload(_WireModel):
    title: str
    artist: str
    album: str
    duration: float
    artwork_url: Optional[str] = Field(default=None, alias="artworkUrl")


class PlaylistTrackPayload(_WireModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, allow_inf_nan=False, extra="allow")

    id: Optional[Union[str, int]] = None
    title: str
    artist: str = ""
    album: str = ""


class PlaybackStateUpdate(_WireModel):
    type: Literal["PlaybackStateUpdate"]
    state: str
    track: TrackPayload
    current_position: float = Field(alias="currentPosition")

    @property
    def playing(self) -> bool:
        return self.state == "PLAYING"


class PlaylistUpdate(_WireModel):
    type: Literal["PlaylistUpdate"]
    tracks: List[PlaylistTrackPayload]
    current_index: int = Field(alias="currentIndex")


class PlaybackModeUpdate(_WireModel):
    type: Literal["PlaybackModeUpdate"]
    shuffle: bool
    repeat_mode: str = Field(alias="repeatMode")


class VolumeUpdate(_WireModel):
    type: Literal["VolumeUpdate"]
    volume: float


InboundMessage = Annotated[
    Union[PlaybackStateUpdate, PlaylistUpdate, PlaybackModeUpdate, VolumeUpdate],
    Field(discriminator="type"),
]

_adapter = TypeAdapter(InboundMessage)

KNOWN_TYPES = frozenset(
    {"PlaybackStateUpdate", "PlaylistUpdate", "PlaybackModeUpdate", "VolumeUpdate"}
)


def decode_message(raw: Union[str, bytes]) -> Optional[InboundMessage]:
    """Parse one text frame. Returns None for anything that should be ignored."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.warning("Ignoring non-JSON message: %s", e)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring message that is not an object: %r", type(data).__name__)
        return None
    tag = data.get("type")
    if tag not in KNOWN_TYPES:
        logger.debug("Ignoring message with unknown type %r", tag)
        return None
    try:
        return _adapter.validate_python(data)
    except ValidationError as e:
        logger.warning("Ignoring malformed %s: %s", tag, e.errors(include_url=False))
        return None
