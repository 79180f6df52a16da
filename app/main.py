"""
FastAPI main application with DDD architecture
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.logging_config import setup_logging
from app.api.router import api_router
from app.api.exception_handlers import setup_exception_handlers
from app.application.use_cases.health_check import HealthCheckUseCase
from app.db.database import get_db

# Import all ORM models to ensure relationships are resolved
import app.infrastructure.orm  # noqa: F401

logger = logging.getLogger(__name__)

Path(settings.PDF_ARCHIVE_DIR).mkdir(parents=True, exist_ok=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup - migrations handle database schema
    setup_logging(settings.LOG_LEVEL)
    logger.info("Starting %s API (%s)...", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield
    logger.info("Shutting down %s API...", settings.PROJECT_NAME)


# Create FastAPI app
app = FastAPI(
    title=f"{settings.PROJECT_NAME} API",
    description=settings.DESCRIPTION,
    version=settings.VERSION,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api/v1")

# Archived report PDFs are served at their public URL
app.mount("/pdfarchived", StaticFiles(directory=settings.PDF_ARCHIVE_DIR, check_dir=False), name="pdfarchived")


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": f"{settings.PROJECT_NAME} API", "version": settings.VERSION}


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Health check endpoint that verifies database connectivity"""
    return HealthCheckUseCase(db).execute()


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
