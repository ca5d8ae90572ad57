# fleet_monitor/main.py
import logging
import random
import threading
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from fleet_monitor.core.config import Settings, get_settings
from fleet_monitor.core.errors import NotFoundError, StorageError
from fleet_monitor.db.seed import seed_machines
from fleet_monitor.services.db_service import SqlStore, resolve_database_url
from fleet_monitor.services.sensor_simulator import generate_all_readings

# Import routers
from fleet_monitor.api.v1.alerts import router as alerts_router
from fleet_monitor.api.v1.dashboard import router as dashboard_router
from fleet_monitor.api.v1.machines import router as machines_router
from fleet_monitor.api.v1.predictions import router as predictions_router
from fleet_monitor.api.v1.sensors import router as sensors_router

logger = logging.getLogger("main")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: one storage handle and one RNG for the whole process
        store = SqlStore.from_url(resolve_database_url(settings))
        rng = random.Random(settings.SIMULATION_SEED)
        try:
            store.init_schema()
            if settings.SEED_ON_STARTUP:
                seed_machines(store, rng)
            if settings.SIMULATE_ON_STARTUP:
                logger.info("Generating initial sensor readings ...")
                generate_all_readings(store, rng)

            app.state.store = store
            app.state.rng = rng
            app.state.simulation_lock = threading.Lock()
            logger.info("Fleet monitor ready (%s)", settings.ENVIRONMENT)
            yield
        finally:
            # Shutdown, also reached when startup fails
            store.close()
            logger.info("Fleet monitor stopped")

    app = FastAPI(title="Predictive Maintenance Fleet Monitor", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["*"],
    )

    # Register routers under /api/v1
    app.include_router(machines_router, prefix="/api/v1")
    app.include_router(sensors_router, prefix="/api/v1")
    app.include_router(predictions_router, prefix="/api/v1")
    app.include_router(alerts_router, prefix="/api/v1")
    app.include_router(dashboard_router, prefix="/api/v1")

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [{"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "detail": details},
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error("%s %s: storage failure: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": "Storage failure"})

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Predictive Maintenance Fleet Monitor API"}

    @app.get("/api/v1/health")
    def health():
        return {"status": "healthy", "service": "predictive-maintenance-api"}

    return app


app = create_app()


def run():
    settings = get_settings()
    uvicorn.run("fleet_monitor.main:app", host=settings.APP_HOST, port=settings.APP_PORT)
