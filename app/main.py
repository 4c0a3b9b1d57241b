"""
Driver Dispatch Service - FastAPI Application
Main entry point for the API server.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api import dispatch_router
from app.config import get_settings
from app.core.exceptions import DispatchError
from app.core.logging import setup_logging
from app.core.middleware import UnhandledErrorMiddleware
from app.database import check_db, init_db


settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    setup_logging()
    logger.info("Starting %s v%s", settings.app_title, settings.app_version)

    # Production schemas come from Alembic; create_all is for local SQLite runs
    if settings.database_url.startswith("sqlite"):
        await init_db()
        logger.info("Database tables initialized")

    yield
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.app_title,
    version=settings.app_version,
    description="""
    ## Driver Dispatch Service API

    Driver matching and delivery pricing for the food delivery marketplace.

    ### Features
    - **Driver Scoring**: Distance, rating, idle and acceptance factors, weighted
    - **Nearest Drivers**: Top ranked candidates for manual selection
    - **Auto Assignment**: Best driver assigned, at most once per order
    - **Delivery Fees**: Per-city pricing with time-window surge multipliers

    ### Main Endpoints
    - `POST /api/v1/driver-dispatch` - `action` = find_nearest_drivers | auto_assign | calculate_delivery_fee
    - `GET /api/v1/dispatch/orders/{id}/scores` - Dispatch score audit for an order
    """,
    lifespan=lifespan,
)

# Added first so it runs inside CORS
app.add_middleware(UnhandledErrorMiddleware)

# CORS, including OPTIONS preflight, for the browser client
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)


@app.exception_handler(DispatchError)
async def dispatch_error_handler(request: Request, exc: DispatchError) -> JSONResponse:
    """Render dispatch errors as {"error": message}."""
    if exc.status_code >= 500:
        logger.error("Driver dispatch error: %s", exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Path/query validation failures use the same error body as everything else."""
    first = exc.errors()[0] if exc.errors() else {"loc": (), "msg": "Invalid request"}
    field = ".".join(str(part) for part in first["loc"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"Invalid field '{field}': {first['msg']}"},
    )


app.include_router(dispatch_router, prefix=settings.api_prefix)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - health check."""
    return {
        "status": "healthy",
        "service": settings.app_title,
        "version": settings.app_version,
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint, including a database round trip."""
    try:
        await check_db()
    except (SQLAlchemyError, OSError) as exc:
        logger.error("Health check database failure: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "database": "disconnected"},
        )
    return {
        "status": "healthy",
        "database": "connected",
    }
