"""
Main entrypoint for the Request Analytics API.

This module assembles the FastAPI application: it sets up logging,
builds the record store and country resolver from the settings,
installs CORS and error handling and includes the router.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn request_analytics.app.main:app --reload
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .api.router import router
from .core.config import Settings
from .core.cors import install_cors
from .core.errors import register_error_handlers
from .core.logging_config import setup_logging
from .services.geo_service import CountryResolver
from .services.stores import RecordStore, build_store


def create_app(settings: Optional[Settings] = None, store: Optional[RecordStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Application settings.  Read from the environment when omitted.
    store : Optional[RecordStore]
        Record store to use instead of the one named in ``settings``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or Settings.from_env()
    # Logging first so that store construction below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    store = store or build_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await app.state.store.setup()
        yield

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.country_resolver = CountryResolver(
        header=settings.country_header,
        ipinfo_token=settings.ipinfo_token,
        timeout=settings.ipinfo_timeout,
    )

    register_error_handlers(app)
    install_cors(app, settings.allowed_origins)
    app.include_router(router)

    return app


# Created at import time so that uvicorn can discover it.
app = create_app()
