"""Core: command encoding, message decoding, reduction, extrapolation, session."""
from musiccontroller.core.extrapolator import PositionExtrapolator
from musiccontroller.core.media_session import MediaSessionHandler
from musiccontroller.core.session import SyncSession

__all__ = ["MediaSessionHandler", "PositionExtrapolator", "SyncSession"]
