"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from investledger.config.settings import get_settings
from investledger.config.logging_config import setup_logging
from investledger.repositories.sqlalchemy.database import init_db
from investledger.api.routers import (
    users_router,
    accounts_router,
    trades_router,
    valuations_router,
    assets_router,
    cron_router,
)
from investledger.core.exceptions import AppError, NotFoundError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    setup_logging()
    init_db()
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Investment account valuation and ledger reconciliation",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(users_router)
app.include_router(accounts_router)
app.include_router(trades_router)
app.include_router(valuations_router)
app.include_router(assets_router)
app.include_router(cron_router)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": exc.code, "message": exc.message},
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Global handler for application errors."""
    return JSONResponse(
        status_code=400,
        content={"error": exc.code, "message": exc.message},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
def root() -> dict[str, str]:
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }
