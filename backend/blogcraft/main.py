"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blogcraft.api.v1 import chat
from blogcraft.api.v1 import router as api_v1_router
from blogcraft.core.config import settings
from blogcraft.core.database import async_session_maker, init_db
from blogcraft.schemas.common import ErrorDetail, ErrorResponse
from blogcraft.services.errors import ServiceError
from blogcraft.services.seed import seed_database

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def prepare_database() -> None:
    """Create tables and seed startup data."""
    await init_db()
    async with async_session_maker() as db:
        await seed_database(db)
        await db.commit()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting BlogCraft API ({settings.app_env})...")
    await prepare_database()
    yield
    # Shutdown
    logger.info("Shutting down BlogCraft API...")


app = FastAPI(
    title="BlogCraft API",
    description="Blog, classroom chat and quiz platform API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str, headers: dict[str, str] | None = None, **extra) -> JSONResponse:
    body = ErrorResponse(message=message, **extra).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        ErrorDetail(
            field=".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path")),
            message=error["msg"],
        )
        for error in exc.errors()
    ]
    return _error(status.HTTP_400_BAD_REQUEST, "Validation error", errors=errors)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# Include API router
app.include_router(api_v1_router, prefix=settings.api_prefix)
app.include_router(chat.router, tags=["chat"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "name": "BlogCraft API",
        "version": "0.1.0",
        "docs": "/docs",
    }
