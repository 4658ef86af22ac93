"""Entry point for the contact service.

Launches the FastAPI application with Uvicorn.  It is intended to be
executed from the project root, for example in Docker, where you only
specify a single Python file to run.

Configuration such as SECRET_KEY, DATABASE_URL, SERVICE_AGENT_ID and
USER_INFORMATION_URL is read from environment variables (see
``contact_service_api/app/core/config.py``).

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from contact_service_api.app.main import app


async def serve() -> None:
    """Serve the API.

    Host and port are read from environment variables ``HOST`` and
    ``PORT``.  Defaults are ``0.0.0.0`` and ``8080``.
    """
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8080"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(serve())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Contact service stopped")
