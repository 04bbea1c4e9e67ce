"""Entry point for the Request Analytics service.

Launches the FastAPI application with Uvicorn.  Configuration such as
AUTH_KEY, STORE_BACKEND and DATABASE_URL is read from the environment
(see ``request_analytics/app/core/config.py``).

Usage:
    python run.py
"""
import asyncio
import os

from uvicorn import Config, Server

from request_analytics.app.main import app


async def main() -> None:
    """Serve the API until interrupted.

    Host and port are read from environment variables ``HOST`` and
    ``PORT``.  Defaults are ``0.0.0.0`` and ``8000``.
    """
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    asyncio.run(main())
