"""Playlist edits. The host's next PlaylistUpdate is the source of truth for order."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from musiccontroller.api.routes.session import session_to_dict
from musiccontroller.api.state import AppState, get_state

router = APIRouter()


class RemoveBody(BaseModel):
    index: int


class MoveBody(BaseModel):
    """Indices as reported by a reorderable list (drop index before removal)."""
    from_index: int
    to_index: int


@router.post("/remove")
async def remove(body: RemoveBody, state: AppState = Depends(get_state)):
    state.session.remove_from_playlist(body.index)
    return session_to_dict(state.session.state)


@router.post("/move")
async def move(body: MoveBody, state: AppState = Depends(get_state)):
    state.session.move_in_playlist(body.from_index, body.to_index)
    return session_to_dict(state.session.state)
