import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventbook.config import Settings, get_settings
from eventbook.database import Database
from eventbook.errors import AppError, AuthError
from eventbook.responses import failure
from eventbook.auth import router as auth_router
from eventbook.events import router as events_router
from eventbook.bookings import router as bookings_router

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def _field_errors(exc: RequestValidationError) -> list:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        errors.append({"field": ".".join(location), "message": error.get("msg", "Invalid value")})
    return errors


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
            detail = exc.message if request.app.state.settings.is_development else None
            return JSONResponse(
                status_code=exc.status_code,
                content=failure("Internal server error", error=detail),
            )
        headers = {"WWW-Authenticate": "Bearer"} if type(exc) is AuthError else None
        return JSONResponse(
            status_code=exc.status_code,
            content=failure(exc.message, errors=getattr(exc, "errors", None)),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=failure("Validation failed", errors=_field_errors(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=failure(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        detail = str(exc) if request.app.state.settings.is_development else None
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=failure("Internal server error", error=detail),
        )


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or get_settings()
    database = database or Database(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if database.ping():
            database.create_all()
        else:
            logger.error("Starting without a database connection")
        yield
        database.dispose()

    # Create FastAPI app
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Event ticket booking API",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(
        auth_router.router,
        prefix=f"{settings.API_PREFIX}/auth",
        tags=["Authentication"]
    )

    app.include_router(
        events_router,
        prefix=f"{settings.API_PREFIX}/events",
        tags=["Events"]
    )

    app.include_router(
        bookings_router,
        prefix=f"{settings.API_PREFIX}/bookings",
        tags=["Bookings"]
    )

    @app.get("/")
    def root():
        """Root endpoint"""
        return {
            "message": settings.PROJECT_NAME,
            "version": "1.0.0",
            "docs": "/docs"
        }

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint"""
        connected = request.app.state.database.ping()
        return {
            "status": "OK",
            "database": "Connected" if connected else "Disconnected"
        }

    return app


def run():
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    import uvicorn
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    run()
