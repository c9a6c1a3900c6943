"""FastAPI application factory"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from moneymap.api.middleware import RequestIDMiddleware, MetricsMiddleware
from moneymap.api.v1 import reconcile, sip, entries, finances, profile, reports
from moneymap.domain.exceptions import InvalidRangeError, PlanClosedError, RecordNotFoundError
from moneymap.infrastructure.observability.logging import setup_logging
from moneymap.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="MoneyMap",
        description="Personal finance records, recurring contributions and reports",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(RecordNotFoundError)
    async def not_found_handler(request: Request, exc: RecordNotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(PlanClosedError)
    async def plan_closed_handler(request: Request, exc: PlanClosedError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.exception_handler(InvalidRangeError)
    async def invalid_range_handler(request: Request, exc: InvalidRangeError):
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(reconcile.router, prefix="/v1", tags=["reconciliation"])
    app.include_router(sip.router, prefix="/v1", tags=["sip"])
    app.include_router(entries.router, prefix="/v1", tags=["entries"])
    app.include_router(finances.router, prefix="/v1", tags=["finances"])
    app.include_router(profile.router, prefix="/v1", tags=["profile"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
