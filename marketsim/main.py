import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy import text

import marketsim.models  # noqa: F401  (register tables on Base.metadata)
from marketsim.db.base import Base, engine, get_db
from marketsim.core.config import settings
from marketsim.core.logging import configure_logging
from marketsim.routers import assets as assets_router
from marketsim.routers import behaviors as behaviors_router
from marketsim.routers import history as history_router
from marketsim.core.errors import (
    SimulatorException,
    simulator_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    logger.info("Market reaction simulator ready (env=%s)", settings.APP_ENV)
    yield


app = FastAPI(
    title="Market Reaction Simulator API",
    description=(
        "**Educational simulator of cryptocurrency market reactions**\n\n"
        "Register events that push an asset up or down, cascade the catalog's "
        "pre-configured impacts onto other assets, and read the half-hour history grid.\n\n"
        "All error responses follow the `{error, code, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(SimulatorException, simulator_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(assets_router.router)
app.include_router(behaviors_router.router)
app.include_router(history_router.router)
app.include_router(history_router.legacy_router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the database
    are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except SQLAlchemyError:
        logger.warning("Health check could not reach the database")
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}


def run() -> None:
    """Development server entry point (`marketsim-serve`)."""
    import uvicorn

    uvicorn.run("marketsim.main:app", host="0.0.0.0", port=settings.PORT)
