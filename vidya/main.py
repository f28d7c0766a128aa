from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from vidya.config import settings
from vidya.database import Database
from vidya.logging_config import init_logging, install_request_logging
from vidya.routers import register_routers
from vidya.services.ai_service import AdvisoryService, build_advisory_service
from vidya.services.seed import seed_reference_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database: Database = app.state.database
    if settings.AUTO_CREATE_TABLES:
        await database.create_all()
    if settings.SEED_REFERENCE_DATA:
        async with database.session() as session:
            await seed_reference_data(session)
    logger.info("%s %s started", settings.APP_NAME, settings.APP_VERSION)
    yield
    await database.dispose()


def _field_name(loc) -> str:
    # Drop the leading "body" / "query" / "path" segment
    parts = [str(part) for part in loc[1:]] or [str(part) for part in loc]
    return ".".join(parts)


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": "Validation error",
                "errors": [
                    {"field": _field_name(error["loc"]), "message": error["msg"]}
                    for error in exc.errors()
                ],
            },
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def create_app(database: Database | None = None, advisor: AdvisoryService | None = None) -> FastAPI:
    init_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Vidya Varadhi API: skill assessment, AI-generated learning pathways, "
            "course enrollment, achievements and industry insights aligned with NSQF."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.database = database or Database(settings.database_url, echo=settings.DEBUG)
    app.state.advisor = advisor or build_advisory_service(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_request_logging(app)
    install_exception_handlers(app)

    # Register all API routers (defined in vidya/routers/__init__.py)
    register_routers(app)

    @app.get("/", tags=["Health"])
    async def root():
        return {
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "status": "running",
            "docs": "/docs",
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
