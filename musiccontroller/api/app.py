"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from musiccontroller.config import LOG_FORMAT, LOG_LEVEL

# Configure logging in the worker process (so session/channel INFO logs are visible under uvicorn)
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

from musiccontroller.api.state import AppState, get_state

# Import routes after state to avoid circular imports
from musiccontroller.api.routes import playback, playlist, session

__all__ = ["app", "AppState", "get_state"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    state = get_state()
    logging.getLogger(__name__).info("Music controller API ready; POST /api/session/connect to pair")

    yield

    await state.shutdown()


app = FastAPI(
    title="Music Controller API",
    description="Local API for remote-controlling a music player host",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session.router, prefix="/api/session", tags=["session"])
app.include_router(playback.router, prefix="/api/playback", tags=["playback"])
app.include_router(playlist.router, prefix="/api/playlist", tags=["playlist"])
