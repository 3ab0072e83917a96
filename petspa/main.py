# petspa/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from petspa.db import create_db_and_tables
from petspa.logging_setup import configure_logging
from petspa.routers import admin_routes, appointments_routes, auth_routes, users_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    create_db_and_tables()
    logger.info("database ready")
    yield


app = FastAPI(title="Princesas Pet Shop Booking API", lifespan=lifespan)

app.include_router(auth_routes.router)
app.include_router(users_routes.router)
app.include_router(appointments_routes.router)
app.include_router(admin_routes.router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
