"""
Finance Tracker: FastAPI application.

This is the entry point for the application.
All routers and error handlers are registered here.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from finance_tracker.config import get_settings
from finance_tracker.errors import StoreError
from finance_tracker.logging_config import configure_logging, get_logger
from finance_tracker.models import Base
from finance_tracker.models.base import engine
from finance_tracker.api.health import router as health_router
from finance_tracker.api.accounts import router as accounts_router
from finance_tracker.api.transactions import router as transactions_router

settings = get_settings()

configure_logging(settings.LOG_LEVEL, debug=settings.DEBUG)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    logger.info(
        "Starting Finance Tracker",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
    yield
    logger.info("Shutting down Finance Tracker")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Personal finance tracker: accounts, transactions, balances",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error handlers ---

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies and paths as 400 with a short message."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(
            str(part) for part in first.get("loc", ()) if part not in ("body", "path")
        )
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"detail": message})


@app.exception_handler(StoreError)
@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: Exception):
    """Hide storage failures behind a generic 500."""
    logger.error(
        "Storage failure",
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Register routers
app.include_router(health_router)
app.include_router(accounts_router, prefix=settings.API_PREFIX)
app.include_router(transactions_router, prefix=settings.API_PREFIX)
