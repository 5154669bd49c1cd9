"""
Main module for the FastAPI application.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from piazza import __version__
from piazza.api.v1.posts import router as posts_router
from piazza.auth.routes import router as auth_router
from piazza.core.config import Settings, get_settings
from piazza.core.errors import PiazzaError, StoreFailure, ValidationError
from piazza.db.session import Database

# Setup logging
logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Lifespan event handler
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan event handler - connects the store on startup and disposes it on shutdown.
    Startup fails if the database cannot be reached.
    """
    settings: Settings = app.state.settings

    # Startup
    database = Database.from_settings(settings)
    await database.connect(create_tables=settings.DB_AUTO_CREATE)
    app.state.db = database
    logger.info(f"{settings.APP_NAME} listening on {settings.API_HOST}:{settings.API_PORT}")

    yield

    # Shutdown
    await database.dispose()
    logger.info(f"{settings.APP_NAME} shutting down")


async def piazza_error_handler(request: Request, exc: PiazzaError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        messages.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    error = ValidationError("; ".join(messages) or None)
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception(f"[DB] Store failure on {request.method} {request.url.path}: {exc}")
    error = StoreFailure()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application. The store handle is created in ``lifespan`` and
    kept on ``app.state.db``.
    """
    if settings is None:
        settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Time-limited, topic-tagged posting board",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Configure CORS
    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origin_list,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(PiazzaError, piazza_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)

    # Include routers
    app.include_router(auth_router, prefix="/api")
    app.include_router(posts_router, prefix="/api")

    @app.get("/")
    async def root():
        """
        Root endpoint for health checks.
        """
        return {"message": "Piazza API is running"}

    @app.get("/health")
    async def health():
        """
        Health check endpoint.
        """
        return {"status": "ok"}

    return app


if __name__ == "__main__":
    """
    Run the application directly.
    """
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.API_HOST,
        port=settings.API_PORT,
    )
