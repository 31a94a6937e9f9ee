import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bang_app.config import settings
from bang_app.api.v1 import links, redirect
from bang_app.exceptions import RegistryError, StoreError
from bang_app.hits.factory import HitSchedulerFactory, HitSchedulerType
from bang_app.schemas.link import HealthStatus, VersionInfo
from bang_app.storage.factory import StoreFactory, StoreBackend
from bang_app.utils.logging import initialize_logging

initialize_logging()
logger = logging.getLogger("bang_app.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Create the shared store and hit scheduler, and tear them down.

    Shutdown order (uvicorn has already stopped accepting connections and
    finished in-flight requests by then):
    1. Drain pending click increments, abandon what's left after the timeout
    2. Close the store, exactly once
    """
    store = StoreFactory.create(StoreBackend(settings.store_backend))
    await store.ping()
    app.state.store = store
    app.state.hits = HitSchedulerFactory.create(HitSchedulerType(settings.hit_scheduler))
    logger.info(f"Starting {settings.app_name} {settings.app_version}...")

    yield

    logger.info("Shutting down...")
    await app.state.hits.drain(timeout=settings.shutdown_drain_timeout)

    logger.info("Cleaning up...")
    await store.close()

    logger.info("Successful shutdown.")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="URL shortener with per-link admin keys and click counters",
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(RegistryError)
async def registry_error_handler(request: Request, exc: RegistryError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/", response_model=VersionInfo)
def read_root():
    """Service version"""
    return {"version": settings.app_version}


@app.get("/health", response_model=HealthStatus)
async def health_check(request: Request):
    """Health check endpoint, pings the record store"""
    try:
        await request.app.state.store.ping()
        status = "healthy"
    except StoreError:
        logger.exception("Record store ping failed")
        status = "degraded"
    return {"status": status, "environment": settings.environment}


######## Include routers
# after / and /health, so those are never taken for slugs
app.include_router(links.router)
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    # uvicorn handles SIGINT/SIGTERM and runs the lifespan shutdown
    uvicorn.run(app, host=settings.host, port=settings.port)
