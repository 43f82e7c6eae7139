"""
FastAPI Application Entry Point.

This module creates and configures the FastAPI application instance.
It handles:
1. Service construction (one FormAssistantService per process)
2. Router registration (HTTP + WebSocket)
3. Middleware configuration (audit logging, CORS)
4. Exception handlers
5. Startup/shutdown, including the optional scheduled session sweep

Run with: uvicorn src.api.main:app
      or: form-assistant   (reads HOST/PORT from the environment)
"""
import asyncio
import sys
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.routes import health_router, realtime_router, session_router
from src.core.audit import AuditMiddleware
from src.core.config import Settings, get_settings
from src.core.exceptions import FormAssistantException
from src.core.logging_config import get_logger, setup_logging
from src.models.responses import ErrorResponse
from src.services.form_service import FormAssistantService, build_service

logger = get_logger(__name__)

APP_VERSION = "1.0.0"


async def _sweep_periodically(service: FormAssistantService, interval_seconds: int) -> None:
    """Run the expiry sweep every interval_seconds until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            service.sweep_expired()
        except Exception as e:
            logger.exception(f"Scheduled session sweep failed: {e}")


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[FormAssistantService] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use; read from the environment at startup
                  when omitted
        service: Prebuilt service (tests pass one wired to a fake
                 gateway); built from settings at startup when omitted

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        Startup fails (and the server exits) when GEMINI_API_KEY is missing.
        """
        sweeper = None
        if service is not None:
            app.state.service = service
        else:
            active = settings or get_settings()
            setup_logging(active.log_level)
            logger.info(f"Starting {active.app_name} in {active.app_env} mode")
            logger.info(f"Gemini model: {active.gemini_model}")

            app.state.service = build_service(active)

            if active.session_sweep_interval_seconds > 0:
                sweeper = asyncio.create_task(
                    _sweep_periodically(app.state.service, active.session_sweep_interval_seconds)
                )
                logger.info(
                    f"Session sweep scheduled every {active.session_sweep_interval_seconds}s "
                    f"(max age {active.session_max_age_minutes}min)"
                )

        yield  # Application runs here

        if sweeper is not None:
            sweeper.cancel()
            with suppress(asyncio.CancelledError):
                await sweeper
        logger.info(f"Shutting down with {app.state.service.session_count()} live sessions")

    app = FastAPI(
        title="Form Assistant API",
        description="""
        Conversational form filling powered by Google Gemini.

        Connect to the `/ws` WebSocket and exchange `create-session`,
        `send-message` and `end-session` events. Extracted fields are
        accumulated per session and returned with every reply.
        """,
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # ============================================================
    # Middleware
    # ============================================================

    audit_enabled = settings.enable_audit_logging if settings else True
    if audit_enabled:
        app.add_middleware(AuditMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins) if settings else ["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
    )

    # ============================================================
    # Exception Handlers
    # ============================================================

    @app.exception_handler(FormAssistantException)
    async def form_assistant_exception_handler(request: Request, exc: FormAssistantException):
        """Render application errors as their error body."""
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle uncaught exceptions with a consistent error body."""
        logger.exception(f"Unhandled exception: {exc}")

        body = ErrorResponse(error="internal_error", message="An unexpected error occurred")
        return JSONResponse(status_code=500, content=body.model_dump(mode="json"))

    # ============================================================
    # Routers
    # ============================================================

    app.include_router(health_router)
    app.include_router(session_router)
    app.include_router(realtime_router)

    @app.get("/", include_in_schema=False)
    async def root():
        """Service banner."""
        return {
            "message": "Form Assistant API",
            "version": APP_VERSION,
            "websocket": "/ws",
            "documentation": "/docs",
            "health": "/health",
        }

    return app


app = create_app()


def run() -> None:
    """Console entry point: validate configuration, then serve."""
    import uvicorn

    try:
        settings = get_settings()
    except ValueError as e:
        setup_logging("INFO")
        logger.critical(f"Failed to initialize services: {e}")
        sys.exit(1)

    setup_logging(settings.log_level)
    logger.info(f"Form assistant listening on port {settings.port}")
    logger.info(f"WebSocket endpoint: ws://localhost:{settings.port}/ws")
    logger.info(f"Health check: http://localhost:{settings.port}/health")

    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
