"""FastAPI application for the ShipRisk API.

Provides the application factory with routers and exception handlers
configured. Pipeline errors map to stable, category-specific messages;
exception text and tracebacks only ever reach the log.
"""

import logging
from contextlib import asynccontextmanager
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.api.routes import query
from src.cli.config import AppConfig, load_config
from src.errors import (
    ExternalServiceError,
    ExternalServiceTimeout,
    InputError,
    PipelineError,
    UpstreamParseError,
)
from src.orchestrator.pipeline import PipelineOrchestrator
from src.utils.logging_config import configure_logging
from src.utils.redaction import sanitize_error_message

logger = logging.getLogger(__name__)


def _error_response(status_code: int, exc: PipelineError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error_code": exc.code, "message": exc.user_message},
    )


async def input_error_handler(request: Request, exc: InputError) -> JSONResponse:
    """Client input problems map to HTTP 400 with the stable message."""
    logger.info("Rejected request: %s", exc)
    return _error_response(400, exc)


async def external_service_error_handler(request: Request, exc: ExternalServiceError) -> JSONResponse:
    """Upstream failures map to 502, timeouts to 504."""
    logger.error(
        "External service %s failed: %s",
        exc.service,
        sanitize_error_message(exc.detail),
        exc_info=exc,
    )
    status_code = 504 if isinstance(exc, ExternalServiceTimeout) else 502
    return _error_response(status_code, exc)


async def upstream_parse_error_handler(request: Request, exc: UpstreamParseError) -> JSONResponse:
    """Unparseable upstream output maps to 502."""
    logger.error("Upstream response unparseable: %s", sanitize_error_message(exc.detail))
    return _error_response(502, exc)


async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    """Any other pipeline error is a generic server error."""
    logger.error("Pipeline error: %s", sanitize_error_message(str(exc)), exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error_code": "E-4999", "message": "An unexpected error occurred."},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log everything, return nothing internal."""
    logger.error("Unhandled exception occurred: %s", type(exc).__name__, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error_code": "E-4999", "message": "An unexpected error occurred."},
    )


def create_app(
    orchestrator: PipelineOrchestrator | None = None,
    config: AppConfig | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        orchestrator: Pre-built orchestrator (tests inject one). When
            omitted, startup loads config and wires the real services.
        config: Config to use instead of ``load_config()``.

    Returns:
        Configured FastAPI app.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.orchestrator is None:
            from src.cli.factory import build_orchestrator

            cfg = config or load_config()
            configure_logging(cfg.server.log_level, cfg.server.log_format, cfg.server.log_file)
            # ConfigurationError here aborts startup
            app.state.orchestrator = build_orchestrator(cfg)
            logger.info("ShipRisk API ready")
        yield

    app = FastAPI(
        title="ShipRisk API",
        description="Natural language questions about shipments and SLA risk",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.orchestrator = orchestrator

    app.add_exception_handler(InputError, input_error_handler)
    app.add_exception_handler(ExternalServiceError, external_service_error_handler)
    app.add_exception_handler(UpstreamParseError, upstream_parse_error_handler)
    app.add_exception_handler(PipelineError, pipeline_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(query.router, prefix="/api/v1")

    @app.get("/health")
    def health_check() -> dict:
        """Liveness check with the installed package version."""
        try:
            version = _pkg_version("shiprisk")
        except PackageNotFoundError:
            version = "unknown"
        return {
            "status": "ok",
            "version": version,
            "ready": app.state.orchestrator is not None,
        }

    return app
