"""Playback intents: transport, seek, shuffle, repeat, volume.

Intents are fire-and-forget. Each route answers with the session state after
the optimistic update; while disconnected the intent is dropped and the state
is returned unchanged.
"""
from typing import Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, Field

from musiccontroller.api.routes.session import session_to_dict
from musiccontroller.api.state import AppState, get_state
from musiccontroller.models.playback import RepeatMode

router = APIRouter()


class PositionBody(BaseModel):
    position_ms: float = Field(allow_inf_nan=False)


class ShuffleBody(BaseModel):
    enabled: Optional[bool] = None


class RepeatBody(BaseModel):
    mode: Optional[RepeatMode] = None


class VolumeBody(BaseModel):
    volume: float = Field(allow_inf_nan=False)


@router.post("/play")
async def play(state: AppState = Depends(get_state)):
    state.session.play()
    return session_to_dict(state.session.state)


@router.post("/pause")
async def pause(state: AppState = Depends(get_state)):
    state.session.pause()
    return session_to_dict(state.session.state)


@router.post("/toggle")
async def toggle(state: AppState = Depends(get_state)):
    """Play if paused, pause if playing."""
    state.session.toggle_play_pause()
    return session_to_dict(state.session.state)


@router.post("/next")
async def next_track(state: AppState = Depends(get_state)):
    state.session.next()
    return session_to_dict(state.session.state)


@router.post("/previous")
async def previous_track(state: AppState = Depends(get_state)):
    state.session.previous()
    return session_to_dict(state.session.state)


@router.post("/refresh")
async def refresh(state: AppState = Depends(get_state)):
    """Ask the host to push its full state again."""
    state.session.request_full_state()
    return session_to_dict(state.session.state)


@router.post("/seek")
async def seek(body: PositionBody, state: AppState = Depends(get_state)):
    state.session.seek_to(body.position_ms)
    return session_to_dict(state.session.state)


@router.post("/seek/begin")
async def seek_begin(body: PositionBody, state: AppState = Depends(get_state)):
    """Seek control grabbed; position display stops following the host."""
    state.session.begin_drag(body.position_ms)
    return session_to_dict(state.session.state)


@router.post("/seek/update")
async def seek_update(body: PositionBody, state: AppState = Depends(get_state)):
    state.session.update_drag(body.position_ms)
    return session_to_dict(state.session.state)


@router.post("/seek/end")
async def seek_end(body: PositionBody, state: AppState = Depends(get_state)):
    """Seek control released; sends one seek command."""
    state.session.end_drag(body.position_ms)
    return session_to_dict(state.session.state)


@router.post("/shuffle")
async def shuffle(body: ShuffleBody | None = Body(None), state: AppState = Depends(get_state)):
    """Set shuffle; toggles when ``enabled`` is omitted."""
    if body is None or body.enabled is None:
        state.session.toggle_shuffle()
    else:
        state.session.set_shuffle(body.enabled)
    return session_to_dict(state.session.state)


@router.post("/repeat")
async def repeat(body: RepeatBody | None = Body(None), state: AppState = Depends(get_state)):
    """Set repeat mode; cycles OFF -> ALL -> ONE when ``mode`` is omitted."""
    if body is None or body.mode is None:
        state.session.cycle_repeat()
    else:
        state.session.set_repeat(body.mode)
    return session_to_dict(state.session.state)


@router.post("/volume")
async def volume(body: VolumeBody, state: AppState = Depends(get_state)):
    state.session.set_volume(body.volume)
    return session_to_dict(state.session.state)
