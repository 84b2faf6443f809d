"""Application entry point and FastAPI app factory."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .config.settings import settings
from .controllers import recordings
from .middleware import StructuredLoggingMiddleware, TelemetryMiddleware

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_JOB_LOGGERS = ("callsentiment.pipelines", "callsentiment.services")


def _rotating_handler(path: str, formatter: logging.Formatter) -> RotatingFileHandler:
    log_path = Path(path)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_path,
        maxBytes=settings.log_max_bytes,
        backupCount=settings.log_backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def _configure_logging() -> None:
    """Stream logs to stdout and the rotating file, plus a job-only file."""

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.DEBUG if settings.debug else logging.INFO

    logging.getLogger().handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(
        _rotating_handler(settings.log_file, logging.Formatter(_LOG_FORMAT))
    )
    root_logger.setLevel(level)

    middleware_logger = logging.getLogger("callsentiment.middleware.structured")
    middleware_logger.handlers.clear()
    middleware_stdout = logging.StreamHandler(sys.stdout)
    middleware_stdout.setFormatter(logging.Formatter("%(message)s"))
    middleware_logger.addHandler(middleware_stdout)
    middleware_logger.setLevel(level)
    middleware_logger.propagate = False

    # Same records as the main log; this file only carries job activity.
    pipeline_handler = _rotating_handler(
        settings.pipeline_log_file,
        logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"),
    )
    for name in _JOB_LOGGERS:
        job_logger = logging.getLogger(name)
        job_logger.handlers.clear()
        job_logger.addHandler(pipeline_handler)

    noisy_loggers = [
        "botocore",
        "boto3",
        "s3transfer",
        "urllib3",
        "httpx",
        "httpcore",
    ]
    for name in noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    _configure_logging()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        description="Call recording transcription and sentiment webhook",
    )

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(StructuredLoggingMiddleware)

    app.include_router(recordings.router)

    @app.get("/health", include_in_schema=False)
    async def health_check() -> dict[str, object]:
        """Health check endpoint."""

        return {
            "status": "healthy",
            "service": settings.app_name,
            "version": settings.app_version,
            "stages": [
                {
                    "order": stage.order,
                    "stage": stage.stage.value,
                    "completes": stage.completes.value,
                    "module": stage.module,
                    "summary": stage.summary,
                }
                for stage in recordings.PIPELINE_STAGES
            ],
        }

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose application metrics for Prometheus scraping."""

        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        logging.getLogger(__name__).info(
            "webserver - started on port %s, webhook path %s",
            settings.port,
            settings.webhook_path,
        )

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "callsentiment.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
