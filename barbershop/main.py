# barbershop/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from barbershop.config import ENABLE_SCHEDULER
from barbershop.db import create_db_and_tables
from barbershop.routers import auth_routes, barbers_routes, bookings_routes, loyalty_routes, owner_routes

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("apscheduler").setLevel(logging.WARNING)
logging.getLogger("twilio.http_client").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    create_db_and_tables()

    if ENABLE_SCHEDULER:
        from barbershop.scheduler import init_scheduler, shutdown_scheduler

        init_scheduler()
    yield
    if ENABLE_SCHEDULER:
        shutdown_scheduler()
    logger.info("Application shutting down...")


app = FastAPI(title="Barbershop API", version="1.0.0", lifespan=lifespan)


@app.get("/health")
def health_check():
    return {"status": "ok"}


app.include_router(auth_routes.router)
app.include_router(barbers_routes.router)
app.include_router(bookings_routes.router)
app.include_router(loyalty_routes.router)
app.include_router(owner_routes.router)
