"""CORS configuration for the single-page client + FastAPI integration."""
from fastapi.middleware.cors import CORSMiddleware

# Base allowed origins for development (Vite and CRA dev servers)
DEV_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def allowed_origins(settings) -> list[str]:
    """Origins allowed to call the API with credentials."""
    origins = [] if settings.is_production else list(DEV_ORIGINS)
    # Add the configured frontend URL if provided
    if settings.frontend_url and settings.frontend_url not in origins:
        origins.append(settings.frontend_url)
    return origins


def add_cors_middleware(app, settings):
    """Add CORS middleware to the FastAPI application."""
    origins = allowed_origins(settings)
    print(f"[CORS] Configuration:")
    print(f"   Environment: {settings.environment}")
    print(f"   Allowed Origins: {origins}")

    # Session cookies need credentials, so origins are listed explicitly
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
