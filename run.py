"""Application entry point.

Starts uvicorn serving the FastAPI app on the host and port from settings.
"""

import logging

import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
