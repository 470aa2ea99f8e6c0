from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from boxtrack.infrastructure.config.settings import get_settings
from boxtrack.infrastructure.persistence.database import engine, get_db
from boxtrack.presentation.api.errors import register_exception_handlers
from boxtrack.presentation.api.v1.routes import codes, containers, locations
from boxtrack.presentation.middleware.correlation import \
    CorrelationIDMiddleware
from boxtrack.shared.logging import get_logger, setup_logging

logger = get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for application initialization and cleanup"""
    setup_logging()
    logger.info("%s %s starting", settings.app_name, settings.app_version)

    # Database schema is managed outside the application (create_all in tests)

    yield

    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Correlation ID for request tracing
app.add_middleware(CorrelationIDMiddleware)

# Security: Using allow_credentials=True requires specific origins (not wildcard)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(locations.router, prefix="/api/v1/locations", tags=["locations"])
app.include_router(containers.router, prefix="/api/v1/containers", tags=["containers"])
app.include_router(codes.router, prefix="/api/v1/codes", tags=["codes"])


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Health check endpoint for load balancers and monitoring.

    Returns:
    - 200 OK if the API and the database respond
    - 503 Service Unavailable otherwise
    """
    checks: dict[str, Any] = {"api": True, "database": False}

    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = True
        return {"status": "healthy", "checks": checks}
    except Exception as e:
        logger.warning("Health check failed: %s", e)
        checks["error"] = str(e)
        return JSONResponse(status_code=503, content={"status": "unhealthy", "checks": checks})
