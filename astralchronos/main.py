"""
FastAPI main application for AstralChronos.
"""
from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager

from astralchronos import __version__
from astralchronos.api.calendar import router as calendar_router
from astralchronos.api.chatbot import router as chatbot_router
from astralchronos.api.dashboard import router as dashboard_router
from astralchronos.api.dependencies import close_clients
from astralchronos.api.events import router as events_router
from astralchronos.api.health import metrics_router, router as health_router
from astralchronos.api.middleware import CacheHeadersMiddleware, MetricsMiddleware, RateLimitMiddleware
from astralchronos.api.quiz import router as quiz_router
from astralchronos.api.responses import ErrorResponse
from astralchronos.api.site import STATIC_DIR, router as site_router
from astralchronos.api.tourism import router as tourism_router
from astralchronos.api.webhooks import router as webhooks_router
from astralchronos.cache.redis_client import close_redis_client
from astralchronos.config import get_settings
from astralchronos.content.repository import get_content_repository
from astralchronos.logging_config import get_logger

logger = get_logger(__name__, component="main_app")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting AstralChronos", environment=settings.environment, **settings.webhook_status())
    # Fail fast on broken fixtures
    get_content_repository()

    yield

    logger.info("Shutting down AstralChronos")
    try:
        await close_clients()
        logger.info("HTTP sessions closed")
    except Exception as e:
        logger.error(f"Error closing HTTP sessions: {e}")

    try:
        close_redis_client()
        logger.info("Redis connections closed")
    except Exception as e:
        logger.error(f"Error closing Redis connections: {e}")


app = FastAPI(
    title="AstralChronos",
    description="Space history, live astronomy data and exploration tools",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.add_middleware(
    RateLimitMiddleware,
    default_limit=300,
    default_window=3600,
    enabled=settings.rate_limit_enabled
)

app.add_middleware(
    CacheHeadersMiddleware,
    enabled=True
)

app.add_middleware(MetricsMiddleware)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.include_router(site_router)
app.include_router(events_router)
app.include_router(calendar_router)
app.include_router(tourism_router)
app.include_router(dashboard_router)
app.include_router(quiz_router)
app.include_router(chatbot_router)
app.include_router(webhooks_router)
app.include_router(health_router)
app.include_router(metrics_router)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc: StarletteHTTPException):
    """Custom HTTP exception handler."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=str(exc.detail),
            code=str(exc.status_code)
        ).model_dump(),
        headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc: RequestValidationError):
    """Report the first validation problem in the standard error shape."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    message = message.removeprefix("Value error, ")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error=message,
            detail="; ".join(
                f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
                for error in errors
            ),
            code="422"
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """General exception handler for unhandled exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="Internal server error",
            detail="An unexpected error occurred",
            code="500"
        ).model_dump()
    )


def run_server():
    """Run the application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "astralchronos.main:app",
        host=settings.host,
        port=settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    run_server()
