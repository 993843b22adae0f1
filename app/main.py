"""Main FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from app import models  # noqa: F401  registers tables on Base.metadata
from app.api.router import api_router
from app.core.config import Settings, get_settings
from app.core.database import Base, build_engine, build_session_factory
from app.core.exceptions import AppException
from app.middleware.logging import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Suppress noisy SQLAlchemy and other library logs
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("python_multipart").setLevel(logging.WARNING)
    logging.getLogger("python_multipart.multipart").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(app.state.engine)
    yield
    logger.info("Shutting down application")
    app.state.engine.dispose()


def create_application(
    settings: Settings | None = None,
    engine: Engine | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The engine is built from settings unless one is passed in, which is how
    tests swap in an in-memory database.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    engine = engine or build_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
Student Grades Manager API.

Upload an Excel (.xlsx) or CSV file of student marks; each upload replaces
the current class list. Students can then be listed, edited and deleted.

## Error Handling

All errors follow a standard format:
```json
{
  "success": false,
  "error": {
    "code": "ERROR_CODE",
    "message": "Human readable message",
    "details": {}
  }
}
```
        """,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.detail,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": "Request validation failed",
                    "details": {"errors": jsonable_errors(exc)},
                },
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An internal server error occurred",
                    "details": {},
                },
            },
        )

    @app.get("/", tags=["Health"])
    def read_root():
        return {
            "message": f"{settings.APP_NAME} API is running",
            "endpoints": [
                f"{method.upper()} {path}"
                for path, operations in app.openapi()["paths"].items()
                if path.startswith(settings.API_PREFIX)
                for method in operations
            ],
        }

    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may hold exception instances that JSONResponse cannot serialize
    return jsonable_encoder([
        {key: value for key, value in error.items() if key != "ctx"}
        for error in exc.errors()
    ])


app = create_application()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
