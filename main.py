import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import prestamistas.models  # ensure models are registered
from prestamistas.core.config import CORS_ORIGINS
from prestamistas.core.logging_config import setup_logging
from prestamistas.initial_data import init_seed
from prestamistas.utils.database import engine, Base

from prestamistas.routers import (
    auth_router,
    users_router,
    customers_router,
    loans_router,
    payments_router,
    settings_router,
    reports_router,
)

setup_logging()
logger = logging.getLogger("prestamistas")

app = FastAPI(title="Sistema de Prestamistas API", version="1.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth_router.router)
app.include_router(users_router.router)
app.include_router(customers_router.router)
app.include_router(loans_router.router)
app.include_router(payments_router.router)
app.include_router(settings_router.router)
app.include_router(reports_router.router)


@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)

    logger.info("Running initial database seeding")
    init_seed()
    logger.info("Seeding complete")


@app.get("/")
def root():
    return {"message": "Sistema de Prestamistas is running"}
