"""Main FastAPI application for the Companion Chat backend."""
import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from companion_chat import __version__
from companion_chat.config import Settings
from companion_chat.middleware.cors import add_cors_middleware
from companion_chat.middleware.request_logging import log_requests
from companion_chat.routers import auth_router, messages_router, preferences_router
from companion_chat.services.companion_ai import CompanionAI
from companion_chat.storage import Storage, create_storage
from companion_chat.utils.logger import configure_logging
from companion_chat.utils.metrics import metrics_collector

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    """Readable summary of the first validation problem."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if first.get("type") == "missing":
        return f"{field} is required" if field else "Request body is required"
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


def create_app(
    settings: Settings | None = None,
    storage: Storage | None = None,
    companion_ai: CompanionAI | None = None,
) -> FastAPI:
    """Build the application for the given settings and collaborators."""
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Companion Chat API",
        description="REST API for configuring an AI companion and chatting with it",
        version=__version__,
    )

    app.state.settings = settings
    app.state.storage = storage or create_storage(settings)
    app.state.companion_ai = companion_ai or CompanionAI.from_settings(settings)

    # Add CORS middleware
    add_cors_middleware(app, settings)
    app.middleware("http")(log_requests)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": _validation_message(exc),
                "errors": [
                    {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
                    for e in exc.errors()
                ],
            },
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {str(exc)}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal Server Error"},
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release storage resources on shutdown."""
        app.state.storage.close()

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": __version__,
            "storage": settings.storage_backend,
            "companion_ai": app.state.companion_ai.enabled,
        }

    @app.get("/metrics")
    async def metrics():
        """Process-local counters and timers."""
        return metrics_collector.get_metrics()

    app.include_router(auth_router, prefix="/api")  # /api/register, /api/login, /api/logout, /api/user
    app.include_router(messages_router, prefix="/api")  # /api/messages
    app.include_router(preferences_router, prefix="/api")  # /api/preferences

    if settings.frontend_dir and os.path.isdir(settings.frontend_dir):
        # Serve the prebuilt client; API routes above take precedence
        app.mount("/", StaticFiles(directory=settings.frontend_dir, html=True), name="frontend")
        print(f"[FRONTEND] Serving static client from {settings.frontend_dir}")
    else:
        @app.get("/")
        async def root():
            """Root endpoint - API welcome message."""
            return {
                "message": "Welcome to the Companion Chat API",
                "version": __version__,
                "docs": "/docs",
                "health": "/health",
            }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "companion_chat.main:app",
        host="0.0.0.0",
        port=int(os.environ.get("PORT", "8000")),
        reload=True,
    )
