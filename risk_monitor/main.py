"""Payment Risk Monitor Service.

REST backend for a fraud and chargeback risk dashboard: CRUD over six
collections, dashboard aggregates and the manual review workflow. Uses
PostgreSQL with the payment_intelligence schema.
"""

import logging
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from sqlalchemy.exc import SQLAlchemyError

from risk_monitor.api.routes import api_router
from risk_monitor.api.routes.health import router as health_router
from risk_monitor.core.config import AppEnvironment, Settings, get_settings
from risk_monitor.core.database import Database
from risk_monitor.core.errors import RiskMonitorError, get_status_code
from risk_monitor.core.logging import setup_logging

logger = logging.getLogger(__name__)

# API version prefix
API_V1_PREFIX = "/api/v1"

# Pydantic error types reported as a missing field, as is any empty-string input
_MISSING_TYPES = {"missing", "string_too_short"}
_LOCATION_ROOTS = {"body", "query", "path", "header"}


def error_body(message: str, details: Any = None) -> dict[str, Any]:
    """Uniform error envelope."""
    body: dict[str, Any] = {"success": False, "error": message}
    if details:
        body["details"] = details
    return body


def describe_validation_errors(errors: Sequence[dict[str, Any]]) -> tuple[str, list[dict[str, Any]]]:
    """Summarize request validation errors as one message naming the fields."""
    missing: list[str] = []
    invalid: list[str] = []
    details = []
    for err in errors:
        path = [str(part) for part in err.get("loc", ()) if part not in _LOCATION_ROOTS]
        field = ".".join(path) or "body"
        absent = err.get("type") in _MISSING_TYPES or err.get("input") == ""
        target = missing if absent and len(path) <= 1 else invalid
        if field not in target:
            target.append(field)
        details.append({"field": field, "message": err.get("msg", ""), "type": err.get("type", "")})

    if missing:
        return f"Missing required fields: {', '.join(missing)}", details
    return f"Invalid request fields: {', '.join(invalid)}", details


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan context manager."""
    settings = get_settings()
    setup_logging(settings)

    logger.info(
        "Starting Payment Risk Monitor Service",
        extra={
            "app": settings.app.name,
            "env": settings.app.env,
            "version": settings.app.version,
        },
    )

    database: Database = app.state.database
    database.init()

    yield

    await database.close()

    logger.info("Payment Risk Monitor Service stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Payment Risk Monitor API",
        description=(
            "API for payment transactions, customers and subscriptions with fraud and "
            "chargeback risk statistics and manual transaction review."
        ),
        version=settings.app.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.app.env != AppEnvironment.PROD else None,
        redoc_url="/redoc" if settings.app.env != AppEnvironment.PROD else None,
        openapi_url="/openapi.json" if settings.app.env != AppEnvironment.PROD else None,
    )

    app.state.settings = settings
    app.state.database = Database(settings.database)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_allowed_origins,
        allow_credentials=settings.security.cors_allow_credentials,
        allow_methods=settings.security.cors_allow_methods,
        allow_headers=settings.security.cors_allow_headers,
    )

    app.include_router(health_router, prefix=API_V1_PREFIX)
    app.include_router(api_router, prefix=API_V1_PREFIX)

    setup_telemetry(app, settings)

    @app.exception_handler(RiskMonitorError)
    async def domain_error_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: RiskMonitorError
    ) -> JSONResponse:
        """Handle domain-specific errors and return appropriate HTTP responses."""
        status_code = get_status_code(exc)
        if status_code >= 500:
            logger.error(
                "Request failed",
                exc_info=exc,
                extra={"path": request.url.path, "method": request.method, "error": exc.message},
            )
        return JSONResponse(status_code=status_code, content=error_body(exc.message, exc.details))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Report malformed or unknown request fields as 400."""
        message, details = describe_validation_errors(exc.errors())
        return JSONResponse(status_code=400, content=error_body(message, details))

    @app.exception_handler(SQLAlchemyError)
    async def persistence_error_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: SQLAlchemyError
    ) -> JSONResponse:
        """Envelope store failures as 500 with best-effort details."""
        logger.exception(
            "Database error",
            extra={"path": request.url.path, "method": request.method, "error": str(exc)},
        )
        details = None if settings.security.sanitize_errors else str(exc)
        return JSONResponse(status_code=500, content=error_body("Database operation failed", details))

    @app.exception_handler(Exception)
    async def global_exception_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions and return 500 error responses."""
        logger.exception(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
        )
        details = None if settings.security.sanitize_errors else str(exc)
        return JSONResponse(status_code=500, content=error_body("Internal server error", details))

    return app


def setup_telemetry(app: FastAPI, settings: Settings) -> None:
    """Setup OpenTelemetry instrumentation."""
    if not settings.observability.otlp_endpoint:
        return

    resource = Resource(
        attributes={
            SERVICE_NAME: settings.observability.service_name,
        }
    )

    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(
        endpoint=settings.observability.otlp_endpoint,
        insecure=settings.observability.otlp_insecure,
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)


def run() -> None:
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "risk_monitor.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.env == AppEnvironment.LOCAL,
        workers=1 if settings.app.env == AppEnvironment.LOCAL else settings.server.workers,
        log_level=settings.app.log_level.value.lower(),
    )


if __name__ == "__main__":
    run()
