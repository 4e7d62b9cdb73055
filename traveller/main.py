import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from traveller.config import settings
from traveller.dependencies import get_cache, get_provider
from traveller.errors import AppError, NotFoundError, error_payload
from traveller.routers import flights, hotels, locations
from traveller.schemas.envelope import error_envelope
from traveller.services.http_client import generate_request_id

logger = logging.getLogger(__name__)


def configure_logging(log_dir: Path | None = None) -> None:
    """Console + rotating file logging, level from ``LOG_LEVEL``."""
    log_dir = log_dir or Path(os.environ.get("LOG_DIR", Path(__file__).resolve().parent.parent / "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    file_handler = RotatingFileHandler(
        log_dir / "traveller.log",
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(), file_handler],
    )

    for noisy in ("httpcore", "httpx", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    cache = get_cache()

    # Startup: sweep leftovers from a previous run, then keep sweeping
    removed = await cache.cleanup()
    if removed:
        logger.info(f"Cache cleanup: {removed} expired entries removed at startup")

    scheduler = None
    if settings.scheduler_enabled:
        from apscheduler.schedulers.asyncio import AsyncIOScheduler
        from apscheduler.triggers.interval import IntervalTrigger

        scheduler = AsyncIOScheduler()

        async def _cleanup_cache():
            count = await cache.cleanup()
            if count:
                logger.info(f"Cache cleanup: {count} expired entries removed")

        scheduler.add_job(
            _cleanup_cache,
            IntervalTrigger(minutes=settings.cache_cleanup_interval_minutes),
            id="cache_cleanup",
        )
        scheduler.start()
        logger.info("Background scheduler started")

    if not settings.hotels_enabled:
        logger.warning("Hotel search is disabled; /api/hotels will return empty results")

    yield

    # Shutdown
    if scheduler:
        scheduler.shutdown(wait=False)
        logger.info("Background scheduler stopped")
    await get_provider().close()
    await cache.close()


app = FastAPI(
    title="Traveller",
    description="Flight, hotel and location search over the Travelpayouts affiliate API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=86400,
)


@app.middleware("http")
async def assign_request_id(request: Request, call_next):
    request.state.request_id = generate_request_id()
    response = await call_next(request)
    response.headers["X-Request-Id"] = request.state.request_id
    return response


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or generate_request_id()


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.code} {exc.message}")
    else:
        logger.info(f"{request.url.path} rejected: {exc.code} {exc.message}")
    status_code, body = error_payload(exc)
    request_id = _request_id(request)
    return JSONResponse(
        error_envelope(body, request_id),
        status_code=status_code,
        headers={"X-Request-Id": request_id},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return await app_error_handler(request, NotFoundError(f"No route for {request.url.path}"))
    request_id = _request_id(request)
    return JSONResponse(
        error_envelope({"code": "HTTP_ERROR", "message": str(exc.detail)}, request_id),
        status_code=exc.status_code,
        headers={"X-Request-Id": request_id},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    status_code, body = error_payload(exc)
    request_id = _request_id(request)
    return JSONResponse(
        error_envelope(body, request_id),
        status_code=status_code,
        headers={"X-Request-Id": request_id},
    )


app.include_router(locations.router, prefix="/api/locations", tags=["locations"])
app.include_router(flights.router, prefix="/api/flights", tags=["flights"])
app.include_router(hotels.router, prefix="/api/hotels", tags=["hotels"])


@app.get("/api/health")
async def health_check():
    stats = get_cache().get_stats()
    return {
        "status": "ok",
        "service": "traveller",
        "hotels_enabled": settings.hotels_enabled,
        "cache": {"memory_size": stats["memory_size"], "durable": stats["durable"]},
    }
