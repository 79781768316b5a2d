"""
Bike Parts API — FastAPI Application Entry Point
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.asynchronous.database import AsyncDatabase
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import auth, orders, products, reviews, users
from app.config import get_settings
from app.core.exceptions import BikePartsError, InternalFaultError
from app.database import build_client, get_db, init_db, ping

settings = get_settings()
logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# ─── Lifespan ─────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store connection and ensure indexes before serving."""
    configure_logging(settings.LOG_LEVEL)
    client = build_client(settings)
    app.state.mongo_client = client
    app.state.db = client[settings.DB_NAME]
    await init_db(app.state.db)
    logger.info("%s started (environment=%s)", settings.APP_TITLE, settings.ENVIRONMENT)
    try:
        yield
    finally:
        await client.close()
        logger.info("Store connection closed")


# ─── App ──────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.APP_TITLE,
    version=settings.APP_VERSION,
    description="Bike parts catalog: users and roles, products, orders and reviews.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# ─── CORS ─────────────────────────────────────────────────────────────────────

origins = settings.ALLOWED_ORIGINS if settings.is_production else ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Exception handlers ───────────────────────────────────────────────────────


@app.exception_handler(BikePartsError)
async def bike_parts_exception_handler(
    request: Request, exc: BikePartsError
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "success": False,
            "error_code": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    fault = InternalFaultError()
    return JSONResponse(status_code=fault.http_status_code, content=fault.to_dict())


# ─── Info & health endpoints ──────────────────────────────────────────────────


@app.get("/", tags=["health"])
async def root() -> Dict[str, Any]:
    return {
        "success": True,
        "message": "hello from bike-parts-manufacturer server",
        "developedBy": settings.DEVELOPED_BY,
    }


@app.get("/health", tags=["health"])
async def health_check(db: AsyncDatabase = Depends(get_db)) -> Dict[str, Any]:
    """
    Returns system health including store connectivity.
    Used by load balancer health checks.
    """
    db_ok = False
    try:
        db_ok = await ping(db)
    except Exception:
        logger.warning("Health check could not reach the store", exc_info=True)

    return {
        "status": "healthy" if db_ok else "degraded",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "db_connected": db_ok,
    }


# ─── Routers ──────────────────────────────────────────────────────────────────

app.include_router(auth.router)
app.include_router(users.router)
app.include_router(products.router)
app.include_router(orders.router)
app.include_router(reviews.router)


def run() -> None:
    """Console entry point: serve on the configured host and port."""
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
