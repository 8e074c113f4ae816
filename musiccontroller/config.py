"""Configuration: controller host, timing, local API."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of musiccontroller package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so MUSICCONTROLLER_* overrides are set
load_dotenv(BASE_DIR / ".env")


def _env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# Music player host (the WebSocket endpoint this controller drives)
CONTROLLER_HOST = os.getenv("MUSICCONTROLLER_HOST", "localhost")
CONTROLLER_PORT = int(os.getenv("MUSICCONTROLLER_PORT", "8080"))
CONTROLLER_PATH = os.getenv("MUSICCONTROLLER_PATH", "/ws")
CONTROLLER_WS_URL = os.getenv(
    "MUSICCONTROLLER_WS_URL", f"ws://{CONTROLLER_HOST}:{CONTROLLER_PORT}{CONTROLLER_PATH}"
)

# Seconds to wait for the channel to open; 0 waits indefinitely
CONNECT_TIMEOUT_SEC = float(os.getenv("MUSICCONTROLLER_CONNECT_TIMEOUT", "0")) or None

# Position extrapolation wake interval
TICK_INTERVAL_SEC = float(os.getenv("MUSICCONTROLLER_TICK_INTERVAL", "0.1"))

# Resume extrapolation at the seek target right after a seek instead of waiting for the host
RESTART_AFTER_SEEK = _env_bool("MUSICCONTROLLER_RESTART_AFTER_SEEK")

# Local control API
API_HOST = os.getenv("MUSICCONTROLLER_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("MUSICCONTROLLER_API_PORT", "8000"))
API_RELOAD = _env_bool("MUSICCONTROLLER_API_RELOAD")

LOG_LEVEL = os.getenv("MUSICCONTROLLER_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(levelname)s: %(name)s: %(message)s"
