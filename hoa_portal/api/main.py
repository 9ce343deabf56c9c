"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from hoa_portal.api.middleware import RequestIDMiddleware, MetricsMiddleware
from hoa_portal.api.v1 import announcements, billing, notifications, vehicles, visitor_passes
from hoa_portal.infrastructure.database.models import Base
from hoa_portal.infrastructure.database.session import engine
from hoa_portal.infrastructure.observability.logging import setup_logging
from hoa_portal.infrastructure.seed import seed_demo_data
from hoa_portal.config import settings
from hoa_portal.portal import Portal

# Setup structured logging
setup_logging(settings.log_level)


def create_app(portal: Portal | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    if portal is None:
        portal = Portal(notification_backend=settings.notification_backend)
        if settings.seed_demo_data:
            seed_demo_data(portal)
        if portal.notification_backend == "database":
            Base.metadata.create_all(bind=engine)

    app = FastAPI(
        title="HOA Portal",
        description="Resident billing, notifications, and community services",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.portal = portal

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
    app.include_router(notifications.router, prefix="/v1", tags=["notifications"])
    app.include_router(billing.router, prefix="/v1", tags=["billing"])
    app.include_router(announcements.router, prefix="/v1", tags=["announcements"])
    app.include_router(vehicles.router, prefix="/v1", tags=["vehicles"])
    app.include_router(visitor_passes.router, prefix="/v1", tags=["visitor-passes"])

    return app


app = create_app()
