# weathermap/api/main.py
from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from weathermap.config.settings import get_settings
from weathermap.api.dependencies import close_http_client, get_precipitation_job
from weathermap.services.precipitation import FetchInProgressError
import logging
from logging.handlers import RotatingFileHandler
import os
from weathermap.api.routers import health, location, places, precipitation, routes
from datetime import datetime

settings = get_settings()


class HealthCheckFilter(logging.Filter):
    def filter(self, record):
        return "/health" not in record.getMessage()


def configure_logging():
    handlers = [logging.StreamHandler()]
    log_file = os.path.join(settings.LOG_DIR, "weathermap.log")
    try:
        os.makedirs(settings.LOG_DIR, exist_ok=True)
        handlers.append(RotatingFileHandler(log_file, maxBytes=5*1024*1024, backupCount=3))
    except OSError as e:
        print(f"Failed to initialize log file {log_file}: {e}")

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
    )
    logging.getLogger("uvicorn.access").addFilter(HealthCheckFilter())


configure_logging()
logger = logging.getLogger(__name__)

from weathermap.state import app_state


app = FastAPI(
    title="WeatherMap Backend",
    description="Location, place search, directions and precipitation forecasts for a map client",
    version=settings.APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _record_startup_fetch(task):
    if task.cancelled():
        return
    if task.exception() is not None:
        logger.error(f"Startup precipitation fetch crashed: {task.exception()}")
        return
    app_state.last_fetch = task.result()


@app.on_event("startup")
async def startup_event():
    """Mark the app ready and kick off the first precipitation fetch."""
    logger.info("=" * 80)
    logger.info("🚀 Starting WeatherMap Backend")
    logger.info("=" * 80)

    app_state.initialization_start = datetime.now()
    logger.info(f"Sampling center: ({settings.CENTER_LAT}, {settings.CENTER_LON}), "
                f"radius {settings.SAMPLE_RADIUS_M:.0f}m, {settings.SAMPLE_COUNT} points")

    if settings.FETCH_ON_STARTUP:
        try:
            task = get_precipitation_job().start()
            task.add_done_callback(_record_startup_fetch)
            logger.info("📊 Startup precipitation fetch scheduled")
        except FetchInProgressError as e:
            logger.warning(f"Startup precipitation fetch skipped: {e}")

    app_state.ready = True
    app_state.initialization_end = datetime.now()
    init_time = (app_state.initialization_end - app_state.initialization_start).total_seconds()
    logger.info(f"✅ Application initialized in {init_time:.2f}s")


@app.on_event("shutdown")
async def shutdown_event():
    """Cancel any in-flight fetch and close the shared HTTP client"""
    logger.info("🛑 Shutting down application...")
    await get_precipitation_job().cancel()
    await close_http_client()
    app_state.ready = False
    logger.info("✅ Shutdown complete")


@app.get("/health", include_in_schema=False)
async def health_check():
    """Basic health check endpoint"""
    return {"status": "healthy"}


@app.get("/status")
async def status_check():
    """Readiness plus a summary of the most recent precipitation fetch"""
    last_fetch = app_state.last_fetch
    return {
        "status": "ready" if app_state.ready else "initializing",
        "version": settings.APP_VERSION,
        "precipitation": {
            "in_flight": get_precipitation_job().in_flight,
            "last_fetch": None if last_fetch is None else {
                "ok": last_fetch.ok,
                "locations": len(last_fetch.locations),
                "records": len(last_fetch.records),
                "error": last_fetch.error,
                "finished_at": last_fetch.finished_at,
            },
        },
        "initialization_time": (
            (app_state.initialization_end - app_state.initialization_start).total_seconds()
            if app_state.initialization_end and app_state.initialization_start
            else None
        )
    }


@app.middleware("http")
async def readiness_check(request, call_next):
    """Reject requests until startup has finished"""
    if not app_state.ready and request.url.path not in ["/health", "/status"]:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": f"Service initializing: {app_state.failure_reason or 'Not ready'}"},
        )
    return await call_next(request)


@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "title": "WeatherMap Backend",
        "version": settings.APP_VERSION,
        "endpoints": {
            "location": "/location",
            "places": "/places/search",
            "routes": "/routes",
            "precipitation": "/precipitation",
        },
        "documentation": {
            "swagger": "/docs",
            "redoc": "/redoc"
        },
        "status": {
            "health": "/health",
            "detailed_status": "/status"
        }
    }


app.include_router(location.router)
app.include_router(places.router)
app.include_router(routes.router)
app.include_router(precipitation.router)
app.include_router(health.router)

logger.info("🔌 Routers registered: location, places, routes, precipitation, health")
