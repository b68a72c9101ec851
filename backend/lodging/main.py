"""
Event Lodging API - Main Application Entry Point

Hotel room booking for event attendees:
- Eligibility chain: enrollment -> paid ticket -> in-person ticket type with hotel
- Capacity-checked reservations under a row lock on the room
- Structured logging with request correlation
- Prometheus metrics for booking outcomes
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lodging.core.config import get_settings
from lodging.core.logging import setup_logging, get_logger
from lodging.core.metrics import metrics_endpoint
from lodging.api.errors import register_exception_handlers
from lodging.api.router import api_router
from lodging.api.middleware import RequestLoggingMiddleware
from lodging.db.session import engine, ping_database

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    if await ping_database():
        logger.info("database_ready")
    else:
        logger.warning("database_unavailable")

    yield

    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Hotel room booking for event attendees with paid, in-person tickets",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    database_ok = await ping_database()
    return {
        "status": "healthy" if database_ok else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "database": "up" if database_ok else "down",
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
