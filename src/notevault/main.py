# Main application entry point
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import auth_router, health_router, notes_router, public_router, sharing_router
from .config import get_settings
from .core.exceptions import (
    AuthenticationError,
    ConflictError,
    InvalidOperationError,
    NotFoundError,
    NoteVaultError,
    ValidationError,
)
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.schemas.common import ErrorResponse
from .database import create_tables

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()

ERROR_STATUS = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    InvalidOperationError: status.HTTP_400_BAD_REQUEST,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Starting NoteVault application",
        extra={
            "version": settings.app_version,
            "environment": settings.environment,
            "debug": settings.debug,
        },
    )

    # tests run against their own in-memory database
    if os.getenv("NOTEVAULT_SKIP_LIFESPAN_DB") == "1":
        logger.info("Skipping DB table creation due to NOTEVAULT_SKIP_LIFESPAN_DB=1")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

    yield

    logger.info("Shutting down NoteVault application")


app = FastAPI(
    title=settings.app_name,
    description="Collaborative notes with read-only sharing and public links",
    version=settings.app_version,
    lifespan=lifespan,
)

# Add logging middleware
app.add_middleware(LoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


@app.exception_handler(NoteVaultError)
async def domain_error_handler(request: Request, exc: NoteVaultError) -> JSONResponse:
    status_code = next(
        (code for kind, code in ERROR_STATUS.items() if isinstance(exc, kind)),
        status.HTTP_400_BAD_REQUEST,
    )
    logger.info(
        "Request rejected",
        extra={"error_code": exc.code.name, "status_code": status_code, "path": request.url.path},
    )
    return _error_response(
        status_code,
        ErrorResponse(
            error=exc.__class__.__name__,
            code=exc.code.name,
            message=exc.message,
            details=exc.details or None,
        ),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        ErrorResponse(
            error="ValidationError",
            code="VALIDATION_FAILED",
            message="Request validation failed",
            details={"errors": jsonable_encoder(exc.errors())},
        ),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error", exc_info=exc, extra={"path": request.url.path})
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(error="InternalError", message="Internal server error"),
    )


# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(notes_router, prefix="/api")
app.include_router(sharing_router, prefix="/api")
app.include_router(public_router, prefix="/api")
app.include_router(health_router, prefix="/api")


# Root endpoint
@app.get("/")
async def root():
    return {"message": "NoteVault API"}


@app.get("/api/")
async def api_root():
    return {
        "message": "NoteVault API",
        "version": settings.app_version,
        "documentation": {"swagger_ui": "/docs", "redoc": "/redoc", "openapi_json": "/openapi.json"},
        "endpoints": {
            "authentication": "/api/auth/",
            "notes": "/api/notes/",
            "shares": "/api/shares/",
            "public": "/api/public/{token}",
            "health": "/api/health/",
        },
    }


# Unprefixed liveness probe
@app.get("/health")
async def basic_health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("notevault.main:app", host=settings.host, port=settings.port, reload=settings.reload)
