"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from identity.dependencies.federated import close_identity_provider_client
from identity.presentation import router as identity_router
from infrastructure.database.dependencies import (
    close_database_connections,
    init_schema,
)
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import load_all_settings
from infrastructure.version import __version__
from products.presentation import router as products_router


@asynccontextmanager
async def portcullis_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration and settings validation (missing or malformed
      configuration aborts startup)
    - Optional schema creation
    - Database engine and identity provider client cleanup on shutdown
    """
    settings = load_all_settings()
    configure_logging(debug=settings.debug)

    probe = DefaultStartupProbe()
    probe.settings_loaded(app_name=settings.app_name, debug=settings.debug)

    if settings.create_schema:
        import identity.infrastructure.models  # noqa: F401

        await init_schema()

    probe.application_started(version=__version__)

    yield

    await close_identity_provider_client()
    await close_database_connections()
    probe.application_stopped()


app = FastAPI(
    title="Portcullis API",
    description="Password, API key and federated authentication with role gating",
    version=__version__,
    lifespan=portcullis_lifespan,
)

app.include_router(identity_router)
app.include_router(products_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok", "version": __version__}
