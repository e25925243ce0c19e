"""FastAPI application entry point.

MedNav API - medication cost-assistance lookups and crowd-sourced price reports.
"""

from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.cors import ALLOW_HEADERS, NoContentCORSMiddleware
from app.error_logger import init_error_logger, log_error
from app.routes import ENDPOINT_METHODS, api_router
from app.schemas import ErrorDetail, ErrorResponse
from app.settings import get_settings
from app.stores.postgres import init_db, close_db, ping_db

logger = logging.getLogger("uvicorn.error")

# Error codes for HTTP errors raised without a structured detail
HTTP_ERROR_CODES = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}
HTTP_ERROR_MESSAGES = {
    404: "Not found",
    405: "Method not allowed",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    settings = get_settings()
    init_error_logger(settings)

    # Initialize database (skip in tests if no DB available)
    try:
        await init_db()
        await ping_db()
        logger.info("Postgres connected")
    except Exception:
        logger.exception("Postgres init failed")

    yield

    # Shutdown
    await close_db()


def _error_content(code: str, message: str, detail: dict | None = None) -> dict:
    return ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail)).model_dump()


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Medication cost-assistance strategies and crowd-sourced price reports",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    # CORS middleware (preflights answered with 204, per-endpoint methods)
    app.add_middleware(
        NoContentCORSMiddleware,
        endpoint_methods=ENDPOINT_METHODS,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=[ALLOW_HEADERS],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """HTTP errors (400 from routes, 404/405 from routing) in structured format."""
        if isinstance(exc.detail, dict) and "code" in exc.detail:
            content = ErrorResponse(error=ErrorDetail(**exc.detail)).model_dump()
        else:
            content = _error_content(
                HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
                HTTP_ERROR_MESSAGES.get(exc.status_code, str(exc.detail)),
            )
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed query/body -> 400 (client-correctable)."""
        return JSONResponse(
            status_code=400,
            content=_error_content(
                "VALIDATION_ERROR",
                "Invalid request",
                {"errors": jsonable_encoder(exc.errors())},
            ),
        )

    # Exception handler for structured error format
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler returning structured error format."""
        log_error(exc, component="api", extra={"method": request.method, "path": request.url.path})
        return JSONResponse(
            status_code=500,
            content=_error_content(
                "INTERNAL_ERROR",
                str(exc) if settings.debug else "Internal server error",
            ),
        )

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, bool]:
        """Health check endpoint."""
        return {"ok": True}

    # Include API routes
    app.include_router(api_router)

    return app


# Application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
