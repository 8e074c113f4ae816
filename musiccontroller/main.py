"""Entry: start the local control API."""
import logging
import uvicorn

from musiccontroller.config import API_HOST, API_PORT, API_RELOAD, LOG_FORMAT, LOG_LEVEL

if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    uvicorn.run(
        "musiccontroller.api.app:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD,
    )
