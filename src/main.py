"""
Preset Resolution Service - Main Application Entry Point

- FastAPI app with lifespan handler
- uvicorn src.main:app starts the service

Patterns Applied:
- Lifespan context manager
- One-time configure_logging() at startup

Anti-Patterns Avoided:
- Deprecated @app.on_event - using modern lifespan pattern
- New httpx.AsyncClient per request - one PresetService per process
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.health import get_health_service
from src.api.health import router as health_router
from src.api.presets import presets_router
from src.core.config import get_settings
from src.core.logging import configure_logging, get_logger
from src.core.tracing import configure_tracing
from src.presets.service import PresetService

settings = get_settings()

# Configure logging ONCE at module load
configure_logging(
    log_level=settings.log_level,
    json_output=settings.log_json,
)

logger = get_logger(__name__)


# =============================================================================
# Lifespan Context Manager
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: build the PresetService, close it on shutdown."""
    logger.info(
        "startup",
        service=settings.service_name,
        version=settings.version,
        environment=settings.environment,
        default_platform=settings.default_platform,
    )

    if settings.tracing_enabled:
        configure_tracing(
            service_name=settings.service_name,
            console_export=settings.tracing_console_export,
            version=settings.version,
        )
        logger.info("tracing_configured")

    app.state.preset_service = PresetService.from_settings(settings)
    get_health_service().set_preset_service_ready(True)

    yield

    logger.info("shutdown", service=settings.service_name)

    get_health_service().set_preset_service_ready(False)
    await app.state.preset_service.close()
    app.state.preset_service = None


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="Preset-Resolution-Service",
    description="Resolves shared configuration presets stored in GitHub, GitLab and Gitea repositories",
    version=settings.version,
    docs_url="/docs" if settings.environment != "production" else None,
    redoc_url="/redoc" if settings.environment != "production" else None,
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(presets_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint redirecting to docs."""
    return {
        "service": settings.service_name,
        "version": settings.version,
        "docs": "/docs",
    }
