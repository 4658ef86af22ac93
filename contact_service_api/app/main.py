"""
Main entrypoint for the Contact Service API.

This module assembles the FastAPI application: it sets up logging,
wires the directory store, identity resolver and profile client onto
``app.state``, registers the error handler and includes the versioned
routers.  The module-level ``app`` uses the SQLite backends configured
through ``core.config``, e.g.::

    uvicorn contact_service_api.app.main:app --reload

Tests call ``create_app`` with in-memory collaborators instead.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.v1.endpoints.results import error_response
from .api.v1.router import router as v1_router
from .clients.user_information import UserInformationClient
from .core.config import settings
from .core.db import init_db
from .core.errors import ContactServiceError
from .core.logging_config import setup_logging
from .identity.resolver import IdentityResolver
from .identity.sqlite_resolver import SQLiteIdentityResolver
from .services.container_repository import ContainerRepository
from .storage.directory_store import DirectoryStore
from .storage.sqlite_store import SQLiteDirectoryStore

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[DirectoryStore] = None,
    resolver: Optional[IdentityResolver] = None,
    user_information_client: Optional[UserInformationClient] = None,
    service_agent_id: Optional[str] = None,
    commit_retries: Optional[int] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store, resolver : optional
        Collaborators to use.  When omitted, the SQLite implementations
        backed by ``settings.database_url`` are used and the database is
        migrated at startup.
    user_information_client : optional
        Client for the profile service.  Built from
        ``settings.user_information_url`` when omitted; the profile
        endpoints answer 503 if neither is available.
    service_agent_id, commit_retries : optional
        Override the corresponding settings.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    uses_sqlite = store is None or resolver is None
    store = store or SQLiteDirectoryStore()
    resolver = resolver or SQLiteIdentityResolver()
    if user_information_client is None and settings.user_information_url:
        user_information_client = UserInformationClient(
            base_url=settings.user_information_url,
            api_key=settings.user_information_token or None,
            timeout=settings.request_timeout,
        )

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.store = store
    app.state.resolver = resolver
    app.state.repository = ContainerRepository(store, resolver, commit_retries)
    app.state.user_information_client = user_information_client
    app.state.service_agent_id = service_agent_id or settings.service_agent_id

    app.include_router(v1_router, prefix="/api/v1")

    @app.exception_handler(ContactServiceError)
    async def contact_service_error_handler(request: Request, exc: ContactServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return error_response(exc)

    if uses_sqlite:
        @app.on_event("startup")
        async def startup_event() -> None:
            # Creates the database file if needed and applies pending migrations.
            init_db()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
