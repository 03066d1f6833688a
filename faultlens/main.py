"""
FastAPI application factory with middleware, CORS, and request tracing.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from faultlens.config import get_settings
from faultlens.engine import __version__ as engine_version
from faultlens.engine.exceptions import InvariantViolationError, MalformedRequestError
from faultlens.routers import anomaly, system
from faultlens.utils.logging import (
    bind_request,
    configure_logging,
    current_request_id,
    get_logger,
)

# Configure logging at module level
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.
    Builds the shared service at startup so bad threshold settings fail fast.
    """
    settings = get_settings()
    service = anomaly.get_anomaly_service()

    logger.info(
        "application_startup",
        version=app.version,
        environment=settings.environment,
        thresholds=service.classifier.thresholds.model_dump(),
    )

    yield

    logger.info("application_shutdown")


def _error_body(message: str) -> dict:
    return {"success": False, "error": message, "request_id": current_request_id()}


def create_app() -> FastAPI:
    """
    Application factory.
    Creates and configures FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Sensor anomaly decision engine: severity, explanation, aggregation and root cause",
        version=engine_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    @app.middleware("http")
    async def request_tracing_middleware(request: Request, call_next):
        """Bind a request ID to the log context and time the request."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        bind_request(request_id, path=request.url.path, method=request.method)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error("request_failed", error=str(e), exc_info=True)
            return JSONResponse(
                status_code=500,
                content=_error_body("Internal server error"),
                headers={"X-Request-ID": request_id},
            )

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response

    @app.exception_handler(MalformedRequestError)
    async def malformed_request_handler(request: Request, exc: MalformedRequestError):
        logger.warning("malformed_request", error=str(exc))
        return JSONResponse(status_code=400, content=_error_body(str(exc)))

    @app.exception_handler(InvariantViolationError)
    async def invariant_violation_handler(request: Request, exc: InvariantViolationError):
        logger.error("invariant_violation", error=str(exc))
        return JSONResponse(
            status_code=500,
            content=_error_body(f"Internal invariant violation: {exc}"),
        )

    @app.get("/health", tags=["System"])
    async def health_check():
        """Liveness probe for load balancers."""
        return {
            "status": "healthy",
            "version": app.version,
            "environment": settings.environment,
        }

    app.include_router(anomaly.router, prefix="/api/v1", tags=["Anomaly"])
    app.include_router(system.router, prefix="/api/v1/system", tags=["System"])

    return app


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "faultlens.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
