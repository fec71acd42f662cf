"""FastAPI application factory for the PracticeBoard API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.staticfiles import StaticFiles

from .. import __version__
from ..ehr.errors import InvalidResourceError
from ..ehr.settings import get_settings
from .config import APIConfig, get_config
from .middleware import LoginRedirectMiddleware
from .routers import (
    allergies_router,
    appointments_router,
    auth_router,
    billing_router,
    conditions_router,
    dashboard_router,
    diagnostic_reports_router,
    health_router,
    medications_router,
    patients_router,
    providers_router,
)
from .security import NotAuthenticatedError

logger = logging.getLogger(__name__)

load_dotenv()


class SPAStaticFiles(StaticFiles):
    """Static files handler that falls back to index.html for SPA routing."""

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as ex:
            if ex.status_code == 404:
                return await super().get_response("index.html", scope)
            raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    problem = get_settings().check()
    if problem:
        logger.warning("%s - backend calls will fail", problem)
    else:
        logger.info("Proxying to EHR backend at %s", get_settings().fhir_base)

    yield

    logger.info("Shutting down...")


async def _invalid_resource(request: Request, exc: InvalidResourceError) -> JSONResponse:
    return JSONResponse(status_code=400, content=exc.to_dict())


async def _not_authenticated(request: Request, exc: NotAuthenticatedError) -> JSONResponse:
    return JSONResponse(status_code=401, content={"error": exc.message})


def create_app(config: APIConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Optional configuration. If None, loads from environment.

    Returns:
        Configured FastAPI application
    """
    if config is None:
        config = get_config()

    app = FastAPI(
        title="PracticeBoard API",
        description="Practice-management dashboard API over a FHIR EHR backend",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_exception_handler(InvalidResourceError, _invalid_resource)
    app.add_exception_handler(NotAuthenticatedError, _not_authenticated)

    app.add_middleware(LoginRedirectMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )

    # Register routers
    for router in (
        health_router,
        auth_router,
        dashboard_router,
        patients_router,
        allergies_router,
        appointments_router,
        providers_router,
        medications_router,
        conditions_router,
        diagnostic_reports_router,
        billing_router,
    ):
        app.include_router(router, prefix="/api")

    # Serve built frontend SPA (no-op if no static dir configured, e.g. during dev)
    if config.static_dir and Path(config.static_dir).is_dir():
        app.mount("/", SPAStaticFiles(directory=config.static_dir, html=True), name="spa")

    return app


# Default app instance for uvicorn
app = create_app()


def main():
    """Entry point for the practiceboard-serve command."""
    import uvicorn

    config = get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "practiceboard.api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    main()
