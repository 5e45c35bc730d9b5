import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_exception_handlers
from app.api.routers import texts as texts_router
from app.core.config import Settings, get_settings
from app.services.bootstrap import ensure_bucket
from app.services.storage import StorageService
from app.services.texts import TextService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    storage = app.state.storage
    if storage is None:
        storage = StorageService(settings)
        app.state.storage = storage

    # BootstrapError propagates and aborts startup.
    state = await ensure_bucket(storage, settings.minio_bucket_name)
    logger.info("Bucket %s ready (%s)", settings.minio_bucket_name, state.value)

    app.state.text_service = TextService(storage, settings)
    yield
    app.state.text_service = None


def create_app(
    settings: Settings | None = None,
    storage: StorageService | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        debug=settings.debug,
        title="yourtext",
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.storage = storage
    app.state.text_service = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Disposition"],
        max_age=172800,
    )
    register_exception_handlers(app)

    app.include_router(texts_router.router)

    return app


app = create_app()
