"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.api.routes import benchmark, communities, export, health, units, upload
from app.core.config import settings
from app.core.database import Base, engine
from app.core.exceptions import NotFoundError, StoreError, StructuralInputError
from app.core.logging import configure_logging

# Import models for Base.metadata.create_all - order matters for foreign keys
from app.models import (
    community,  # noqa: F401
    unit,  # noqa: F401
    consumption_reading,  # noqa: F401
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    configure_logging()
    # Startup: Create database tables
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready")
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Community utility consumption ingestion and benchmarking",
    lifespan=lifespan,
)


@app.exception_handler(StructuralInputError)
async def structural_input_handler(request: Request, exc: StructuralInputError) -> JSONResponse:
    """Reject batches that cannot be imported at all."""
    logger.warning(f"Rejected import: {exc}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Map missing communities and units to 404."""
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Hide storage failures behind a generic 500."""
    logger.error(f"Store failure on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal storage error"},
    )


# Include API routers
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(upload.router, prefix="/api")
app.include_router(benchmark.router, prefix="/api")
app.include_router(units.router, prefix="/api")
app.include_router(communities.router, prefix="/api")
app.include_router(export.router, prefix="/api")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
