"""Session state projection, connect and disconnect."""
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from musiccontroller.api.state import AppState, get_state
from musiccontroller.models.session import ConnectionPhase, SessionState

router = APIRouter()


def format_duration(ms: int) -> str:
    """HH:MM:SS, as the controller shows position and duration."""
    total = max(0, int(round(ms / 1000)))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def session_to_dict(s: SessionState) -> Dict[str, Any]:
    """Map SessionState to our API shape."""
    track = s.track
    position_ms = s.position_for_display
    return {
        "phase": s.phase.value,
        "notice": s.notice,
        "is_playing": s.is_playing,
        "track": {
            "title": track.title,
            "artist": track.artist,
            "album": track.album,
            "duration_ms": track.duration_ms,
            "artwork_url": track.artwork_url,
        }
        if track is not None
        else None,
        "position_ms": position_ms,
        "duration_ms": s.duration_ms,
        "position_text": format_duration(position_ms),
        "duration_text": format_duration(s.duration_ms),
        "seeking": s.seek.active,
        "shuffle": s.mode.shuffle,
        "repeat_mode": s.mode.repeat_mode.value,
        "volume": s.volume.volume,
        "playlist": {
            "current_index": s.playlist.current_index,
            "tracks": [
                {
                    "id": entry.id,
                    "key": entry.key,
                    "title": entry.title,
                    "artist": entry.artist,
                    "album": entry.album,
                    "current": i == s.playlist.current_index,
                }
                for i, entry in enumerate(s.playlist.tracks)
            ],
        },
    }


class ConnectBody(BaseModel):
    key: str


@router.get("")
async def get_session(state: AppState = Depends(get_state)):
    """Return the current session state."""
    return session_to_dict(state.session.state)


@router.post("/connect")
async def connect(body: ConnectBody, state: AppState = Depends(get_state)):
    """Pair with the player using the controller key. Replaces any existing session."""
    key = body.key.strip()
    if not key:
        raise HTTPException(status_code=400, detail="Enter the controller key shown by the player.")
    session = await state.connect(key)
    if session.phase is not ConnectionPhase.CONNECTED:
        raise HTTPException(status_code=502, detail=session.state.notice or "Could not connect.")
    return session_to_dict(session.state)


@router.post("/disconnect")
async def disconnect(state: AppState = Depends(get_state)):
    """Close the channel and drop the session."""
    await state.disconnect()
    return {"ok": True}
