"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from credit_desk.api.middleware import RequestIDMiddleware, MetricsMiddleware
from credit_desk.api.dependencies import get_request_id
from credit_desk.api.v1 import credit, customers, imports, payments, reports
from credit_desk.infrastructure.observability.logging import setup_logging
from credit_desk.domain.exceptions import DomainException
from credit_desk.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Credit Desk",
        description="Customer credit tracking: limits, imports, payments and reports",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        # Domain errors a router did not map surface as 422
        logging.warning(f"Unhandled domain error: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(credit.router, prefix="/v1", tags=["credit"])
    app.include_router(customers.router, prefix="/v1", tags=["customers"])
    app.include_router(imports.router, prefix="/v1", tags=["imports"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
