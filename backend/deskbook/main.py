"""
Desk Booking API - Main Application Entry Point

Shared desk reservations with:
- Recurring series (daily / weekday / weekly) resolved against existing bookings
- Conflict previews with shorten / contiguous block / shifted start suggestions
- Per-seat optimistic revision checks against double booking
- Usage analytics cached in Redis
- Structured logging with request correlation
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deskbook.core.config import get_settings
from deskbook.core.exceptions import DeskBookingError, InternalError
from deskbook.core.logging import setup_logging, get_logger
from deskbook.core.metrics import metrics_endpoint
from deskbook.api.router import api_router
from deskbook.api.middleware import RequestLoggingMiddleware
from deskbook.services.cache_service import get_redis, close_redis, get_cache_stats

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    redis_client = await get_redis()
    if redis_client:
        logger.info("redis_ready")
    else:
        logger.warning("redis_unavailable", message="Running without analytics cache")

    yield

    await close_redis()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Shared desk booking with recurring series, conflict suggestions and analytics",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


@app.exception_handler(DeskBookingError)
async def desk_booking_error_handler(request: Request, exc: DeskBookingError) -> JSONResponse:
    if isinstance(exc, InternalError):
        logger.error("internal_error", error=exc.message, path=request.url.path, exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content={"message": "Unexpected server error."})

    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, **exc.extra()},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_error",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"message": "Unexpected server error."})


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    cache_stats = await get_cache_stats()
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache": cache_stats,
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
