"""
ftsmeili API Main Application

Entry point for the FastAPI application.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ftsmeili.platform.config import settings
from ftsmeili.platform.exceptions import ClientError, ConfigurationError, TransientTransportError
from ftsmeili.platform.logging import configure_logging, get_logger
from ftsmeili.api.routers import index, search, settings as settings_router
from ftsmeili.api.dependencies import init_resources, close_resources, get_platform

# Configure logging on import
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting ftsmeili API...")
    await init_resources()

    yield

    logger.info("Shutting down ftsmeili API...")
    await close_resources()
    logger.info("Resources closed.")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Meilisearch platform for full-text search providers",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# ERROR HANDLERS
# =============================================================================


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message, "error_code": exc.error_code},
    )


@app.exception_handler(TransientTransportError)
async def transient_error_handler(request: Request, exc: TransientTransportError) -> JSONResponse:
    logger.warning("search_engine_unavailable", path=request.url.path, error=exc.message)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message, "error_code": exc.error_code},
        headers={"Retry-After": "30"},
    )


@app.exception_handler(ClientError)
async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message, "error_code": exc.error_code},
    )


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================


@app.get("/health/live", tags=["Health"])
async def liveness() -> dict:
    """Liveness probe - is the service running?"""
    return {"status": "alive"}


@app.get("/health/ready", tags=["Health"])
async def readiness() -> dict:
    """
    Readiness probe - is the service ready to accept traffic?
    Checks that the platform is configured and Meilisearch answers.
    """
    meili_healthy = False
    try:
        platform = await get_platform()
        meili_healthy = await platform.test_platform()
    except ConfigurationError:
        pass

    return {
        "status": "ready" if meili_healthy else "not_ready",
        "version": settings.VERSION,
        "checks": {
            "meilisearch": "healthy" if meili_healthy else "unhealthy",
        },
    }


# =============================================================================
# API ROUTERS
# =============================================================================

app.include_router(settings_router.router, prefix="/api/v1/settings", tags=["Settings"])
app.include_router(index.router, prefix="/api/v1/index", tags=["Index"])
app.include_router(search.router, prefix="/api/v1", tags=["Search"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ftsmeili.api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
