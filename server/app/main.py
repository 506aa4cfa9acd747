"""FastAPI application initialization and configuration."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.database import check_db, close_db, engine, init_db
from .core.exceptions import (
    ProblemDetailsException,
    generic_exception_handler,
    http_exception_handler,
    problem_details_handler,
    request_validation_handler,
)
from .core.middleware import setup_middleware
from .core.observability import (
    SERVICE_NAME,
    SERVICE_VERSION,
    instrument_fastapi,
    instrument_sqlalchemy,
    setup_metrics,
    setup_structured_logging,
    setup_tracing,
)
from .routers import (
    booking_router,
    content_router,
    deals_router,
    destinations_router,
    feedback_router,
    health_router,
    hotels_router,
    metrics_router,
    stats_router,
    tour_router,
    users_router,
    vehicles_router,
)
from .schemas.health import HealthResponse, HealthStatus, ReadinessResponse
from .workers.manager import worker_manager

# Configure structured logging
setup_structured_logging()

# Configure traditional logging for compatibility
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Creates missing tables, wires telemetry and runs the maintenance workers
    for the lifetime of the process.
    """
    logger.info(f"Starting {SERVICE_NAME} ({settings.environment})")

    setup_tracing(SERVICE_NAME)
    setup_metrics(SERVICE_NAME)
    instrument_sqlalchemy(engine.sync_engine)

    await init_db()
    logger.info("Database initialized successfully")

    if settings.enable_workers:
        await worker_manager.start_all()

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down")
    try:
        if settings.enable_workers:
            await worker_manager.stop_all()
        await close_db()
    except Exception as e:
        logger.error(f"Error during application cleanup: {e}", exc_info=True)

    logger.info("Application shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    app = FastAPI(
        title="Indus Tours API",
        description="Tour catalog, booking funnel and admin back office for a travel agency",
        version=SERVICE_VERSION,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "traceparent", "tracestate"],
    )

    setup_middleware(app, enable_logging=True)
    instrument_fastapi(app)

    # Every error leaves as application/problem+json
    app.add_exception_handler(ProblemDetailsException, problem_details_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Liveness check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status=HealthStatus.HEALTHY,
            timestamp=datetime.utcnow(),
            version=SERVICE_VERSION,
        )

    @app.get(
        "/ready",
        response_model=ReadinessResponse,
        tags=["Health"],
        summary="Readiness check",
        responses={503: {"model": ReadinessResponse}},
    )
    async def readiness_check():
        """Ready only when the database answers ``SELECT 1``."""
        try:
            database_ok = await check_db()
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Readiness check failed: {e}")
            database_ok = False

        response = ReadinessResponse(
            status=HealthStatus.READY if database_ok else HealthStatus.NOT_READY,
            timestamp=datetime.utcnow(),
            version=SERVICE_VERSION,
            database=database_ok,
        )
        return JSONResponse(
            status_code=status.HTTP_200_OK if database_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(mode="json"),
        )

    @app.get("/info", tags=["Info"], summary="Service information", response_model=dict)
    async def service_info():
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "environment": settings.environment,
            "debug": settings.debug,
            "features": {
                "email_notifications": settings.email_enabled,
                "background_workers": settings.enable_workers,
                "idempotency": True,
                "tracing": bool(settings.otlp_endpoint),
                "problem_details": True,
            },
            "workers": worker_manager.get_worker_status(),
            "endpoints": {
                "health": "/health",
                "readiness": "/ready",
                "metrics": "/metrics",
                "docs": "/docs" if settings.debug else None,
            },
        }

    app.include_router(health_router)
    app.include_router(tour_router)
    app.include_router(deals_router)
    app.include_router(destinations_router)
    app.include_router(hotels_router)
    app.include_router(vehicles_router)
    app.include_router(booking_router)
    app.include_router(stats_router)
    app.include_router(users_router)
    app.include_router(feedback_router)
    app.include_router(content_router)
    app.include_router(metrics_router)

    logger.info("FastAPI application created and configured")

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True,
    )
