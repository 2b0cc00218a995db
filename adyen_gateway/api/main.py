"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from adyen_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from adyen_gateway.api.v1 import checkout, methods, payments
from adyen_gateway.api.v1.schemas import ErrorResponse
from adyen_gateway.domain.exceptions import PaymentsControllerError
from adyen_gateway.infrastructure.database.models import Base
from adyen_gateway.infrastructure.database.session import engine
from adyen_gateway.infrastructure.observability.logging import setup_logging
from adyen_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Create the payment table when it does not exist yet"""
    Base.metadata.create_all(bind=engine)
    yield


async def payments_controller_error_handler(request: Request, exc: PaymentsControllerError) -> JSONResponse:
    """Structured error body for rejected payment submissions"""
    body = ErrorResponse(code=exc.code, message=exc.message, data=exc.data)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Adyen Gateway",
        description="Adyen Checkout adapter for generic payments",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(PaymentsControllerError, payments_controller_error_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    prefix = f"/{settings.rest_namespace.strip('/')}"
    app.include_router(payments.router, prefix=prefix, tags=["payments"])
    app.include_router(checkout.router, prefix=prefix, tags=["checkout"])
    app.include_router(methods.router, prefix=prefix, tags=["payment-methods"])

    return app


app = create_app()
