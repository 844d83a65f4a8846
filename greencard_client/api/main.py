"""FastAPI application factory"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from greencard_client.api.middleware import RequestIDMiddleware, MetricsMiddleware
from greencard_client.api.v1 import connectivity, credentials, profile
from greencard_client.bootstrap import Services, build_services
from greencard_client.infrastructure.observability.logging import setup_logging
from greencard_client.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app(services: Optional[Services] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        services: Prebuilt service graph; built from settings when omitted.
            The app owns it either way and closes it on shutdown.
    """
    services = services or build_services()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await services.aclose()

    app = FastAPI(
        title="Greencard Client",
        description="Greencard fare account access with stale-data-preserving refresh",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.services = services

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(profile.router, prefix="/v1", tags=["profile"])
    app.include_router(credentials.router, prefix="/v1", tags=["credentials"])
    app.include_router(connectivity.router, prefix="/v1", tags=["connectivity"])

    return app


app = create_app()
